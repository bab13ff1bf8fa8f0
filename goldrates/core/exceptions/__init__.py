"""Exception handling module."""

from goldrates.core.exceptions.base import (
    ConfigError,
    FetchError,
    FetchErrorKind,
    GoldRatesError,
    ProfileConfigError,
    StoreError,
    StoreErrorKind,
)
from goldrates.core.exceptions.codes import ErrorCode

__all__ = [
    "GoldRatesError",
    "ConfigError",
    "ProfileConfigError",
    "FetchError",
    "FetchErrorKind",
    "StoreError",
    "StoreErrorKind",
    "ErrorCode",
]
