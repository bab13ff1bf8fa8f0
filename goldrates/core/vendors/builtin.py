"""Built-in vendor profiles.

URLs are deployment configuration and are left empty here; supply them through
the vendors file (see :func:`goldrates.core.vendors.loader.load_vendor_profiles`).
"""

from __future__ import annotations

from goldrates.core.models.vendors import (
    CategorySignature,
    HeaderSkipStrategy,
    LabelRule,
    VendorProfile,
)

GOLD_RATES = "GoldRates"
OUR_RATES = "OurRates"
CUSTOMER_SELL = "CustomerSell"

_MSGOLD_NOISE = ("DETAILS", "WE BUY")

TTTBULLION = VendorProfile(
    vendor_id="tttbullion",
    display_name="TTT Bullion",
    url="",
    categories=(
        CategorySignature(
            tag=GOLD_RATES,
            required=("Gold",),
            excluded=("Silver",),
            two_sided=True,
            noise_tokens=("DETAILS",),
        ),
    ),
    header_skip=HeaderSkipStrategy.BY_POSITION,
    primary_category=GOLD_RATES,
)

MSGOLD = VendorProfile(
    vendor_id="msgold",
    display_name="MS Gold",
    url="",
    categories=(
        CategorySignature(
            tag=OUR_RATES,
            required=("WE BUY", "WE SELL"),
            two_sided=True,
            noise_tokens=_MSGOLD_NOISE,
        ),
        CategorySignature(
            tag=CUSTOMER_SELL,
            required=("WE BUY",),
            excluded=("WE SELL",),
            two_sided=False,
            noise_tokens=_MSGOLD_NOISE,
        ),
    ),
    header_skip=HeaderSkipStrategy.BY_CONTENT_FILTER,
    purity_tokens=("999.9", "999", "916", "835", "750", "375"),
    label_rules=(
        LabelRule(("USD", "oz"), "999.9 Gold USD / Oz", frozenset({OUR_RATES})),
        LabelRule(("MYR", "kg"), "999.9 Gold MYR / KG", frozenset({OUR_RATES})),
        LabelRule(("MYR", "tael"), "999.9 Gold MYR / Tael", frozenset({OUR_RATES})),
        LabelRule(("MYR", "g"), "999.9 Gold MYR / Gram", frozenset({OUR_RATES})),
        LabelRule(("USD", "MYR"), "USD / MYR", frozenset({OUR_RATES})),
        LabelRule((), "{purity} MYR / Gram", frozenset({CUSTOMER_SELL})),
    ),
)

BUILTIN_PROFILES: dict[str, VendorProfile] = {
    profile.vendor_id: profile for profile in (TTTBULLION, MSGOLD)
}


def builtin_profiles() -> dict[str, VendorProfile]:
    """Return a fresh mapping of the built-in profiles keyed by vendor id."""

    return dict(BUILTIN_PROFILES)


__all__ = [
    "BUILTIN_PROFILES",
    "CUSTOMER_SELL",
    "GOLD_RATES",
    "MSGOLD",
    "OUR_RATES",
    "TTTBULLION",
    "builtin_profiles",
]
