"""Vendor profiles: built-in definitions and configuration loading."""

from goldrates.core.vendors.builtin import (
    BUILTIN_PROFILES,
    CUSTOMER_SELL,
    GOLD_RATES,
    MSGOLD,
    OUR_RATES,
    TTTBULLION,
    builtin_profiles,
)
from goldrates.core.vendors.loader import get_profile, load_vendor_profiles, profiles_from_mapping

__all__ = [
    "BUILTIN_PROFILES",
    "CUSTOMER_SELL",
    "GOLD_RATES",
    "MSGOLD",
    "OUR_RATES",
    "TTTBULLION",
    "builtin_profiles",
    "get_profile",
    "load_vendor_profiles",
    "profiles_from_mapping",
]
