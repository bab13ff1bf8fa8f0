"""Stable error codes shared across the extraction engine and its collaborators."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes surfaced in exceptions, log records and CLI payloads."""

    GENERAL_ERROR = "GENERAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    PROFILE_INVALID = "PROFILE_INVALID"
    VENDOR_NOT_FOUND = "VENDOR_NOT_FOUND"
    FETCH_TIMEOUT = "FETCH_TIMEOUT"
    FETCH_NAVIGATION_FAILED = "FETCH_NAVIGATION_FAILED"
    STORE_CONNECTION_FAILED = "STORE_CONNECTION_FAILED"
    STORE_CONSTRAINT_VIOLATION = "STORE_CONSTRAINT_VIOLATION"
    NUMERIC_MALFORMED = "NUMERIC_MALFORMED"
    TABLE_AMBIGUOUS = "TABLE_AMBIGUOUS"
    CATEGORY_UNCLASSIFIED = "CATEGORY_UNCLASSIFIED"
    EMPTY_BATCH = "EMPTY_BATCH"


__all__ = ["ErrorCode"]
