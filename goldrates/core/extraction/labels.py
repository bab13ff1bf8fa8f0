"""Vendor label normalization onto canonical detail names."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from goldrates.core.models.vendors import LabelRule, VendorProfile


@dataclass(frozen=True, slots=True)
class NormalizedLabel:
    """Canonical detail name and purity resolved for a raw vendor label."""

    raw: str
    detail_name: str
    purity: str | None = None
    rule_index: int | None = None

    @property
    def matched(self) -> bool:
        return self.rule_index is not None


@dataclass(frozen=True)
class VendorLabelRules:
    """Ordered rule table and purity tokens for one vendor."""

    rules: tuple[LabelRule, ...] = ()
    purity_tokens: tuple[str, ...] = ()

    @classmethod
    def from_profile(cls, profile: VendorProfile) -> VendorLabelRules:
        return cls(rules=profile.label_rules, purity_tokens=profile.purity_tokens)


def collapse_whitespace(value: str) -> str:
    return " ".join(value.split())


def extract_purity(label: str, purity_tokens: Sequence[str]) -> str | None:
    """Return the purity token found in ``label``, longest literal first.

    ``"999.9"`` is tried before ``"999"`` whatever the configured order, so a
    label carrying both yields ``"999.9"``. Equal lengths keep configured order.
    """

    ordered = sorted(enumerate(purity_tokens), key=lambda item: (-len(item[1]), item[0]))
    for _, token in ordered:
        if token and token in label:
            return token
    return None


class LabelNormalizer:
    """Maps vendor-specific row labels to canonical names and purities."""

    def __init__(self, vendors: Mapping[str, VendorLabelRules] | None = None) -> None:
        self._vendors: dict[str, VendorLabelRules] = dict(vendors or {})

    @classmethod
    def from_profiles(cls, profiles: Iterable[VendorProfile]) -> LabelNormalizer:
        return cls({profile.vendor_id: VendorLabelRules.from_profile(profile) for profile in profiles})

    def normalize(self, vendor_id: str, raw_label: str, category: str | None = None) -> NormalizedLabel:
        """Resolve ``raw_label`` with the rules known for ``vendor_id``.

        Unknown vendors fall back to the whitespace-collapsed label so new
        rows still surface downstream.
        """

        return self.apply(self._vendors.get(vendor_id, VendorLabelRules()), raw_label, category)

    def apply(self, vendor_rules: VendorLabelRules, raw_label: str, category: str | None = None) -> NormalizedLabel:
        """Resolve ``raw_label`` against an explicit rule table; first matching rule wins."""

        label = collapse_whitespace(raw_label)
        purity = extract_purity(label, vendor_rules.purity_tokens)

        for index, rule in enumerate(vendor_rules.rules):
            if not rule.applies_to(category):
                continue
            if rule.uses_purity and purity is None:
                continue
            if all(token in label for token in rule.tokens):
                detail_name = rule.output.replace("{purity}", purity or "")
                return NormalizedLabel(raw=raw_label, detail_name=detail_name, purity=purity, rule_index=index)

        return NormalizedLabel(raw=raw_label, detail_name=label, purity=purity)


__all__ = [
    "LabelNormalizer",
    "NormalizedLabel",
    "VendorLabelRules",
    "collapse_whitespace",
    "extract_purity",
]
