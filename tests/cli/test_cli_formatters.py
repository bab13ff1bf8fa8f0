from __future__ import annotations

import io
import json
from decimal import Decimal

import pytest

from goldrates.cli.formatters import JSONLFormatter, TableFormatter, create_formatter


def test_jsonl_formatter_writes_decimals_as_strings() -> None:
    stream = io.StringIO()
    JSONLFormatter().render(
        [{"detail_name": "Gold 1g", "we_buy": Decimal("250.10"), "we_sell": None, "extra": 1}],
        stream=stream,
        columns=["detail_name", "we_buy", "we_sell"],
    )

    assert json.loads(stream.getvalue()) == {"detail_name": "Gold 1g", "we_buy": "250.10", "we_sell": None}


def test_table_formatter_renders_cells() -> None:
    stream = io.StringIO()
    TableFormatter(no_color=True).render(
        [{"vendor_id": "msgold", "success": True, "categories": ["OurRates", "CustomerSell"], "reason": None}],
        stream=stream,
        title="Runs",
    )

    output = stream.getvalue()
    assert "Runs" in output
    assert "yes" in output
    assert "OurRates, CustomerSell" in output
    assert "-" in output


def test_table_formatter_reports_empty_rows() -> None:
    stream = io.StringIO()
    TableFormatter(no_color=True).render([], stream=stream, columns=["vendor_id"])

    assert "No data available." in stream.getvalue()


def test_create_formatter_rejects_unknown_names() -> None:
    assert isinstance(create_formatter(" JSONL "), JSONLFormatter)
    with pytest.raises(ValueError, match="Unsupported format"):
        create_formatter("csv")
