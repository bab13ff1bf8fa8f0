"""Core data models."""

from goldrates.core.models.rates import ExtractionBatch, ExtractionOutcome, RateRecord
from goldrates.core.models.tables import RawRow, RawTable
from goldrates.core.models.vendors import (
    CategorySignature,
    HeaderSkipStrategy,
    LabelRule,
    VendorProfile,
)

__all__ = [
    "RawRow",
    "RawTable",
    "RateRecord",
    "ExtractionBatch",
    "ExtractionOutcome",
    "CategorySignature",
    "HeaderSkipStrategy",
    "LabelRule",
    "VendorProfile",
]
