"""Static per-vendor configuration describing how a rate page is read."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class HeaderSkipStrategy(str, Enum):
    """How header and banner rows are removed from a classified table."""

    BY_POSITION = "by_position"
    BY_CONTENT_FILTER = "by_content_filter"


@dataclass(frozen=True)
class CategorySignature:
    """Textual signature recognising the table that holds one rate category."""

    tag: str
    required: tuple[str, ...] = ()
    excluded: tuple[str, ...] = ()
    two_sided: bool = True
    noise_tokens: tuple[str, ...] = ()
    header_skip: HeaderSkipStrategy | None = None

    def matches(self, text: str) -> bool:
        """Return whether ``text`` has every required and no excluded substring."""

        return all(token in text for token in self.required) and not any(
            token in text for token in self.excluded
        )

    @property
    def min_cells(self) -> int:
        return 3 if self.two_sided else 2


@dataclass(frozen=True)
class LabelRule:
    """Maps labels containing every token onto a canonical detail name.

    ``output`` may embed ``{purity}``; such a rule only applies when a purity
    token was found in the label.
    """

    tokens: tuple[str, ...]
    output: str
    categories: frozenset[str] = frozenset()

    def applies_to(self, category: str | None) -> bool:
        return not self.categories or category is None or category in self.categories

    @property
    def uses_purity(self) -> bool:
        return "{purity}" in self.output


@dataclass(frozen=True)
class VendorProfile:
    """Everything the extraction engine needs to know about one vendor site."""

    vendor_id: str
    display_name: str
    url: str
    categories: tuple[CategorySignature, ...]
    header_skip: HeaderSkipStrategy = HeaderSkipStrategy.BY_CONTENT_FILTER
    purity_tokens: tuple[str, ...] = ()
    label_rules: tuple[LabelRule, ...] = ()
    primary_category: str | None = None

    @property
    def category_signatures(self) -> dict[str, CategorySignature]:
        """Category tag to signature, in profile order."""

        return {signature.tag: signature for signature in self.categories}

    def category(self, tag: str) -> CategorySignature:
        try:
            return self.category_signatures[tag]
        except KeyError:
            raise KeyError(f"vendor {self.vendor_id!r} has no category {tag!r}") from None

    def header_skip_for(self, tag: str) -> HeaderSkipStrategy:
        """Strategy for ``tag``: the category override, else the vendor default."""

        return self.category(tag).header_skip or self.header_skip


__all__ = ["HeaderSkipStrategy", "CategorySignature", "LabelRule", "VendorProfile"]
