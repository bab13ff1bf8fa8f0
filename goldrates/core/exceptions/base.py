"""Core exception classes for goldrates."""

from __future__ import annotations

from enum import Enum
from typing import Any

from goldrates.core.exceptions.codes import ErrorCode


class GoldRatesError(Exception):
    """Base exception carrying a stable error code and structured details."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """Initialise the exception.

        Args:
            message: Human readable message.
            error_code: Stable error code.
            details: Additional structured context.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ConfigError(GoldRatesError):
    """Raised when application configuration cannot be loaded."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if path:
            super_details["path"] = path
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR.value, super_details)


class ProfileConfigError(GoldRatesError):
    """Raised when a vendor profile definition is invalid or unknown."""

    def __init__(
        self,
        message: str,
        vendor_id: str | None = None,
        error_code: str = ErrorCode.PROFILE_INVALID.value,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if vendor_id:
            super_details["vendor_id"] = vendor_id
        super().__init__(message, error_code, super_details)
        self.vendor_id = vendor_id


class FetchErrorKind(str, Enum):
    """Failure modes of a page fetch."""

    TIMEOUT = "timeout"
    NAVIGATION_FAILED = "navigation_failed"


class FetchError(GoldRatesError):
    """Raised by page sources when a page cannot be rendered in time."""

    _CODES = {
        FetchErrorKind.TIMEOUT: ErrorCode.FETCH_TIMEOUT,
        FetchErrorKind.NAVIGATION_FAILED: ErrorCode.FETCH_NAVIGATION_FAILED,
    }

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["kind"] = kind.value
        if url:
            super_details["url"] = url
        super().__init__(message, self._CODES[kind].value, super_details)
        self.kind = kind
        self.url = url


class StoreErrorKind(str, Enum):
    """Failure modes of the rate store."""

    CONNECTION_FAILED = "connection_failed"
    CONSTRAINT_VIOLATION = "constraint_violation"


class StoreError(GoldRatesError):
    """Raised by rate stores when a replace cannot be completed."""

    _CODES = {
        StoreErrorKind.CONNECTION_FAILED: ErrorCode.STORE_CONNECTION_FAILED,
        StoreErrorKind.CONSTRAINT_VIOLATION: ErrorCode.STORE_CONSTRAINT_VIOLATION,
    }

    def __init__(
        self,
        message: str,
        kind: StoreErrorKind,
        vendor_id: str | None = None,
        category: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["kind"] = kind.value
        if vendor_id:
            super_details["vendor_id"] = vendor_id
        if category:
            super_details["category"] = category
        super().__init__(message, self._CODES[kind].value, super_details)
        self.kind = kind
        self.vendor_id = vendor_id
        self.category = category


__all__ = [
    "GoldRatesError",
    "ConfigError",
    "ProfileConfigError",
    "FetchError",
    "FetchErrorKind",
    "StoreError",
    "StoreErrorKind",
]
