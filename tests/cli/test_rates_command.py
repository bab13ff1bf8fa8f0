"""Tests for ``rates show``."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from goldrates.cli import run as run_module
from goldrates.cli.main import create_app
from goldrates.core.exceptions.base import StoreError, StoreErrorKind
from goldrates.core.models.rates import RateRecord


@pytest.fixture
def stocked_store(rate_store, monkeypatch: pytest.MonkeyPatch):
    rate_store.replace(
        "msgold",
        "OurRates",
        [RateRecord(vendor_id="msgold", category="OurRates", detail_name="USD / MYR", we_buy="4.70", we_sell="4.75")],
    )
    rate_store.replace(
        "msgold",
        "CustomerSell",
        [
            RateRecord(
                vendor_id="msgold",
                category="CustomerSell",
                detail_name="916 MYR / Gram",
                we_buy="300.50",
                purity="916",
            )
        ],
    )
    monkeypatch.setattr(run_module, "get_rate_store", lambda config: rate_store)
    return rate_store


def test_show_all_categories(runner: CliRunner, workspace: Path, stocked_store, json_rows) -> None:
    result = runner.invoke(create_app(), ["--format", "jsonl", "rates", "show", "msgold"])

    assert result.exit_code == 0, result.output
    assert [row["detail_name"] for row in json_rows(result.output, "detail_name")] == [
        "USD / MYR",
        "916 MYR / Gram",
    ]
    assert stocked_store.closed


def test_show_single_category(runner: CliRunner, workspace: Path, stocked_store, json_rows) -> None:
    result = runner.invoke(
        create_app(),
        ["--format", "jsonl", "rates", "show", "msgold", "--category", "CustomerSell"],
    )

    assert result.exit_code == 0, result.output
    rows = json_rows(result.output, "detail_name")
    assert [(row["detail_name"], row["we_buy"], row["we_sell"]) for row in rows] == [
        ("916 MYR / Gram", "300.50", None)
    ]


def test_show_table_title(runner: CliRunner, workspace: Path, stocked_store) -> None:
    result = runner.invoke(create_app(), ["--no-color", "rates", "show", "msgold"], env={"COLUMNS": "200"})

    assert result.exit_code == 0, result.output
    assert "MS Gold rates" in result.output
    assert "USD / MYR" in result.output


def test_show_unknown_category(runner: CliRunner, workspace: Path, stocked_store) -> None:
    result = runner.invoke(create_app(), ["rates", "show", "msgold", "--category", "GoldRates"])

    assert result.exit_code == 2
    assert "Unknown category" in result.output


def test_show_empty_snapshot(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(create_app(), ["rates", "show", "tttbullion"])

    assert result.exit_code == 0, result.output
    assert "No data available." in result.output


def test_show_store_failure(runner: CliRunner, workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    class BrokenStore:
        closed = False

        def snapshot(self, vendor_id, category=None):
            raise StoreError("database locked", StoreErrorKind.CONNECTION_FAILED, vendor_id)

        def close(self):
            self.closed = True

    store = BrokenStore()
    monkeypatch.setattr(run_module, "get_rate_store", lambda config: store)

    result = runner.invoke(create_app(), ["rates", "show", "tttbullion"])

    assert result.exit_code == 30
    assert "STORE_CONNECTION_FAILED" in result.output
    assert store.closed
