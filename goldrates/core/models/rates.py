"""Canonical rate records and per-run batches."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class RateRecord(BaseModel):
    """A single normalized quote row."""

    model_config = ConfigDict(frozen=True)

    vendor_id: str
    category: str
    detail_name: str
    we_buy: Decimal
    we_sell: Decimal | None = None
    purity: str | None = None

    @field_validator("detail_name")
    @classmethod
    def _require_detail_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("detail_name must not be empty")
        return value

    @field_validator("we_buy", "we_sell")
    @classmethod
    def _require_non_negative(cls, value: Decimal | None) -> Decimal | None:
        if value is not None and value < 0:
            raise ValueError("rates must be non-negative")
        return value

    @field_serializer("we_buy", "we_sell", when_used="json")
    def serialize_decimal(self, value: Decimal | None) -> str | None:
        """Serialize Decimal to string."""
        if value is None:
            return None
        return str(value)


class ExtractionBatch(BaseModel):
    """All records extracted from one page fetch for one vendor."""

    model_config = ConfigDict(frozen=True)

    vendor_id: str
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    records: tuple[RateRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def by_category(self) -> dict[str, list[RateRecord]]:
        """Group records by category, keeping first-seen category order."""

        grouped: dict[str, list[RateRecord]] = {}
        for record in self.records:
            grouped.setdefault(record.category, []).append(record)
        return grouped


@dataclass(frozen=True)
class ExtractionOutcome:
    """Result of a single pipeline run."""

    success: bool
    record_count: int
    reason: str | None = None
    vendor_id: str | None = None
    batch: ExtractionBatch | None = None
    categories_written: tuple[str, ...] = field(default=())
    error_code: str | None = None
    # Categories whose previously stored rows were left in place.
    stale_categories: tuple[str, ...] = field(default=())


__all__ = ["RateRecord", "ExtractionBatch", "ExtractionOutcome"]
