"""Turn the rows of a classified table into rate records."""

from __future__ import annotations

from collections.abc import Iterator

from goldrates.core.extraction.labels import LabelNormalizer, VendorLabelRules, collapse_whitespace
from goldrates.core.extraction.numeric import NumericFieldParser, get_numeric_parser
from goldrates.core.logging import logger
from goldrates.core.models.rates import RateRecord
from goldrates.core.models.tables import RawRow, RawTable
from goldrates.core.models.vendors import CategorySignature, HeaderSkipStrategy, VendorProfile


def is_noise_row(row: RawRow, noise_tokens: tuple[str, ...]) -> bool:
    """Header/banner test used by the content filter strategy."""

    first = row[0].strip() if row else ""
    if not first:
        return True
    return any(token in first for token in noise_tokens)


class RowExtractor:
    """Extracts :class:`RateRecord` rows from a table for one category."""

    def __init__(
        self,
        normalizer: LabelNormalizer | None = None,
        parser: NumericFieldParser | None = None,
    ) -> None:
        self.normalizer = normalizer or LabelNormalizer()
        self.parser = parser or get_numeric_parser()

    def extract(
        self,
        table: RawTable,
        category: str,
        profile: VendorProfile,
        header_skip: HeaderSkipStrategy | None = None,
    ) -> list[RateRecord]:
        """Extract ``category`` rows; ``header_skip`` overrides the profile strategy."""

        signature = profile.category(category)
        rules = VendorLabelRules.from_profile(profile)
        strategy = header_skip or profile.header_skip_for(category)
        log = logger.bind(vendor=profile.vendor_id, category=category)
        records: list[RateRecord] = []
        for index, row in self._data_rows(table, signature, strategy):
            record = self._extract_row(row, signature, profile, rules)
            if record is None:
                log.debug("Row {} dropped: {!r}", index, row)
                continue
            records.append(record)

        log.info("Extracted {} of {} rows", len(records), len(table))
        return records

    def _data_rows(
        self,
        table: RawTable,
        signature: CategorySignature,
        strategy: HeaderSkipStrategy,
    ) -> Iterator[tuple[int, RawRow]]:
        for index, row in enumerate(table.rows):
            if strategy is HeaderSkipStrategy.BY_POSITION:
                if index == 0:
                    continue
            elif is_noise_row(row, signature.noise_tokens):
                continue
            yield index, row

    def _extract_row(
        self,
        row: RawRow,
        signature: CategorySignature,
        profile: VendorProfile,
        rules: VendorLabelRules,
    ) -> RateRecord | None:
        if len(row) < signature.min_cells:
            return None

        label = collapse_whitespace(row[0])
        if not label:
            return None

        we_buy = self.parser.parse(row[1])
        if we_buy is None:
            return None

        we_sell = None
        if signature.two_sided:
            we_sell = self.parser.parse(row[2])
            if we_sell is None:
                return None

        normalized = self.normalizer.apply(rules, label, signature.tag)
        return RateRecord(
            vendor_id=profile.vendor_id,
            category=signature.tag,
            detail_name=normalized.detail_name,
            we_buy=we_buy,
            we_sell=we_sell,
            purity=normalized.purity,
        )


__all__ = ["RowExtractor", "is_noise_row"]
