"""Tests for numeric field parsing."""

from __future__ import annotations

import io
import json
from decimal import Decimal

import pytest

from goldrates.core.extraction.numeric import NumericFieldParser, get_numeric_parser, parse_decimal
from goldrates.core.logging import LogConfig, StructuredLogger


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1,234.50", Decimal("1234.50")),
        ("  255.00 ", Decimal("255.00")),
        ("RM 348,000", Decimal("348000")),
        ("2,310.5 / oz", Decimal("2310.5")),
        ("240", Decimal("240")),
    ],
)
def test_parse_decimal_extracts_first_numeric_run(text: str, expected: Decimal) -> None:
    assert parse_decimal(text) == expected


def test_fraction_is_kept_as_written() -> None:
    value = parse_decimal("250.10")

    assert value == Decimal("250.10")
    assert str(value) == "250.10"


@pytest.mark.parametrize("text", ["", "   ", "N/A", "-", "call us", None])
def test_text_without_digits_is_absent(text: str | None) -> None:
    assert parse_decimal(text) is None


def test_malformed_run_is_logged_and_absent() -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(level="WARNING", stream=buffer))

    assert parse_decimal("1.2.3") is None

    records = [json.loads(line) for line in buffer.getvalue().splitlines() if line.strip()]
    assert len(records) == 1
    assert records[0]["level"] == "WARNING"
    assert records[0]["error_code"] == "NUMERIC_MALFORMED"
    assert "1.2.3" in records[0]["message"]


def test_parser_object_delegates_to_parse_decimal() -> None:
    parser = NumericFieldParser()

    assert parser.parse("3,300.00") == Decimal("3300.00")
    assert parser.parse("sold out") is None
    assert get_numeric_parser() is get_numeric_parser()


def test_punctuation_before_the_number_is_the_first_run() -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(level="WARNING", stream=buffer))

    assert parse_decimal("RM. 250.10") is None

    records = [json.loads(line) for line in buffer.getvalue().splitlines() if line.strip()]
    assert [record["error_code"] for record in records] == ["NUMERIC_MALFORMED"]
