"""Tests for the ``run`` and ``watch`` commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from goldrates.cli import run as run_module
from goldrates.cli.main import create_app

TTT_PAGE = """
<table>
  <tr><th>Gold</th><th>We Buy</th><th>We Sell</th></tr>
  <tr><td>Gold 1g</td><td>250.10</td><td>255.00</td></tr>
  <tr><td>Gold 10g</td><td>2,501.00</td><td>2,550.00</td></tr>
</table>
<table><tr><td>Silver 1kg</td><td>3,100.00</td><td>3,300.00</td></tr></table>
"""


@pytest.fixture
def ttt_page(workspace: Path) -> Path:
    page = workspace / "ttt.html"
    page.write_text(TTT_PAGE, encoding="utf-8")
    return page


def test_run_from_saved_page_updates_store(runner: CliRunner, ttt_page: Path, json_rows) -> None:
    app = create_app()

    result = runner.invoke(
        app,
        ["--format", "jsonl", "run", "tttbullion", "--source", "file", "--file", str(ttt_page)],
    )

    assert result.exit_code == 0, result.output
    assert json_rows(result.output, "success") == [
        {
            "vendor_id": "tttbullion",
            "success": True,
            "records": 2,
            "categories": ["GoldRates"],
            "reason": None,
        }
    ]

    shown = runner.invoke(app, ["--format", "jsonl", "rates", "show", "tttbullion"])
    assert shown.exit_code == 0, shown.output
    rows = json_rows(shown.output, "detail_name")
    assert [row["detail_name"] for row in rows] == ["Gold 1g", "Gold 10g"]
    assert rows[1]["we_buy"] == "2501.00"


def test_run_without_data_exits_with_failure(runner: CliRunner, workspace: Path, json_rows) -> None:
    page = workspace / "empty.html"
    page.write_text("<p>Under maintenance</p>", encoding="utf-8")

    result = runner.invoke(
        create_app(),
        ["--format", "jsonl", "run", "--source", "file", "--file", str(page)],
    )

    assert result.exit_code == 20
    outcome = json_rows(result.output, "success")[0]
    assert outcome["vendor_id"] == "tttbullion"
    assert outcome["success"] is False
    assert outcome["reason"] == "no data extracted"


def test_run_requires_url_for_network_sources(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(create_app(), ["run", "msgold", "--source", "http"])

    assert result.exit_code == 10
    assert "PROFILE_INVALID" in result.output
    assert "msgold" in result.output


def test_run_unknown_vendor(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(create_app(), ["run", "goldsmith", "--source", "file", "--file", "x.html"])

    assert result.exit_code == 10
    assert "VENDOR_NOT_FOUND" in result.output


def test_file_source_requires_path(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(create_app(), ["run", "--source", "file"])

    assert result.exit_code == 10
    assert "FILE_REQUIRED" in result.output


def test_run_all_vendors_uses_factories(
    runner: CliRunner,
    vendors_with_urls: Path,
    monkeypatch: pytest.MonkeyPatch,
    page_source_factory,
    rate_store,
    ttt_tables,
    msgold_tables,
) -> None:
    source = page_source_factory(ttt_tables + msgold_tables)
    requested: list[run_module.SourceKind] = []

    def fake_page_source(kind, config, file=None):
        requested.append(kind)
        return source

    monkeypatch.setattr(run_module, "get_page_source", fake_page_source)
    monkeypatch.setattr(run_module, "get_rate_store", lambda config: rate_store)

    result = runner.invoke(create_app(), ["run", "--all"])

    assert result.exit_code == 0, result.output
    assert requested == [run_module.SourceKind.BROWSER]
    assert sorted(url for url, _ in source.calls) == ["https://ms.test/", "https://ttt.test/"]
    assert sorted(category for _, category, _ in rate_store.calls) == ["CustomerSell", "GoldRates", "OurRates"]
    assert rate_store.closed


def test_run_reports_store_failure(
    runner: CliRunner,
    vendors_with_urls: Path,
    monkeypatch: pytest.MonkeyPatch,
    page_source_factory,
    failing_rate_store,
    ttt_tables,
    json_rows,
) -> None:
    store = failing_rate_store("GoldRates")
    monkeypatch.setattr(run_module, "get_page_source", lambda kind, config, file=None: page_source_factory(ttt_tables))
    monkeypatch.setattr(run_module, "get_rate_store", lambda config: store)

    result = runner.invoke(create_app(), ["--format", "jsonl", "run", "tttbullion"])

    assert result.exit_code == 20
    assert json_rows(result.output, "success")[0]["reason"] == "database unavailable"
    assert store.closed


def test_watch_repeats_runs(
    runner: CliRunner,
    vendors_with_urls: Path,
    monkeypatch: pytest.MonkeyPatch,
    page_source_factory,
    rate_store,
    ttt_tables,
    json_rows,
) -> None:
    source = page_source_factory(ttt_tables)
    monkeypatch.setattr(run_module, "get_page_source", lambda kind, config, file=None: source)
    monkeypatch.setattr(run_module, "get_rate_store", lambda config: rate_store)

    result = runner.invoke(
        create_app(),
        ["--format", "jsonl", "watch", "tttbullion", "--interval", "0", "--iterations", "3"],
    )

    assert result.exit_code == 0, result.output
    assert len(source.calls) == 3
    assert len(json_rows(result.output, "success")) == 3
    assert rate_store.closed


def test_watch_keeps_going_after_failures(
    runner: CliRunner,
    vendors_with_urls: Path,
    monkeypatch: pytest.MonkeyPatch,
    page_source_factory,
    rate_store,
    fetch_timeout,
    json_rows,
) -> None:
    source = page_source_factory(error=fetch_timeout)
    monkeypatch.setattr(run_module, "get_page_source", lambda kind, config, file=None: source)
    monkeypatch.setattr(run_module, "get_rate_store", lambda config: rate_store)

    result = runner.invoke(
        create_app(),
        ["--format", "jsonl", "watch", "--interval", "0", "--iterations", "2"],
    )

    assert result.exit_code == 0, result.output
    outcomes = json_rows(result.output, "success")
    assert [outcome["success"] for outcome in outcomes] == [False, False]
    assert rate_store.calls == []


def test_output_option_writes_file(runner: CliRunner, workspace: Path, ttt_page: Path) -> None:
    target = workspace / "outcomes.jsonl"

    result = runner.invoke(
        create_app(),
        ["--format", "jsonl", "--output", str(target), "run", "--source", "file", "--file", str(ttt_page)],
    )

    assert result.exit_code == 0, result.output
    lines = target.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0])["records"] == 2
