"""Locate the rate tables on a page by their textual signature."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from goldrates.core.exceptions.codes import ErrorCode
from goldrates.core.logging import logger
from goldrates.core.models.tables import RawTable
from goldrates.core.models.vendors import VendorProfile


@dataclass(frozen=True, slots=True)
class TableMatch:
    """A table assigned to a category, with its document position."""

    category: str
    table: RawTable
    index: int
    via_fallback: bool = False


class TableClassifier:
    """Assigns page tables to the categories declared by a vendor profile.

    Each category takes the first table in document order whose text
    satisfies its signature, independently of the other categories, so one
    table may serve several categories. This is positional and will pick the
    wrong table if a page gains an earlier table with the same wording.
    """

    def classify(self, tables: Sequence[RawTable], profile: VendorProfile) -> dict[str, RawTable | None]:
        return {
            tag: match.table if match else None
            for tag, match in self.match(tables, profile).items()
        }

    def match(self, tables: Sequence[RawTable], profile: VendorProfile) -> dict[str, TableMatch | None]:
        log = logger.bind(vendor=profile.vendor_id)
        texts = [table.text for table in tables]
        assigned: dict[str, TableMatch | None] = {}

        for signature in profile.categories:
            hits = [index for index, text in enumerate(texts) if signature.matches(text)]
            if not hits:
                assigned[signature.tag] = None
                continue
            index = hits[0]
            assigned[signature.tag] = TableMatch(category=signature.tag, table=tables[index], index=index)
            log.debug("Table {} classified as {}", index, signature.tag)
            for extra in hits[1:]:
                log.bind(category=signature.tag, error_code=ErrorCode.TABLE_AMBIGUOUS.value).warning(
                    "Table {} also matches {} (already table {}); ignored", extra, signature.tag, index
                )

        primary = profile.primary_category
        if primary and assigned.get(primary) is None and tables:
            assigned[primary] = self._positional_fallback(tables[0], profile, primary)

        for tag, found in assigned.items():
            if found is None:
                log.bind(error_code=ErrorCode.CATEGORY_UNCLASSIFIED.value).warning(
                    "No table found for category {}", tag
                )
        return assigned

    def _positional_fallback(self, first: RawTable, profile: VendorProfile, tag: str) -> TableMatch | None:
        log = logger.bind(vendor=profile.vendor_id)
        log.info("No signature match for primary category {}; trying the first table", tag)
        if profile.category(tag).matches(first.text):
            return TableMatch(category=tag, table=first, index=0, via_fallback=True)
        log.info("First table failed validation for {}", tag)
        return None


__all__ = ["TableClassifier", "TableMatch"]
