"""Decimal extraction from noisy table cell text."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from functools import lru_cache

from goldrates.core.exceptions.codes import ErrorCode
from goldrates.core.logging import logger

# First run of digits, thousands separators and decimal points.
_NUMERIC_RUN = re.compile(r"[0-9,.]+")


def parse_decimal(text: str | None) -> Decimal | None:
    """Return the first decimal quantity found in ``text`` or ``None``.

    ``"1,234.50 per gram"`` yields ``Decimal("1234.50")``. Text without any
    run yields ``None``; so does a run that is not a valid decimal (for example
    ``"1.2.3"``, or the lone ``"."`` that ``"RM. 250.10"`` starts with), which
    is logged rather than raised.
    """

    if text is None:
        return None
    match = _NUMERIC_RUN.search(text.strip())
    if match is None:
        return None

    run = match.group(0)
    try:
        return Decimal(run.replace(",", ""))
    except InvalidOperation:
        logger.bind(error_code=ErrorCode.NUMERIC_MALFORMED.value).warning(
            "Malformed numeric field {!r} in cell {!r}", run, text
        )
        return None


class NumericFieldParser:
    """Object wrapper around :func:`parse_decimal` for injection into extractors."""

    def parse(self, text: str | None) -> Decimal | None:
        return parse_decimal(text)


@lru_cache(maxsize=1)
def get_numeric_parser() -> NumericFieldParser:
    return NumericFieldParser()


__all__ = ["NumericFieldParser", "get_numeric_parser", "parse_decimal"]
