"""Shared fixtures for CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

_GOLDRATES_ENV = (
    "GOLDRATES_DATABASE",
    "GOLDRATES_VENDORS_FILE",
    "GOLDRATES_DEFAULT_VENDOR",
    "GOLDRATES_LOG_LEVEL",
    "GOLDRATES_LOG_FILE",
)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated working directory with the rate database under ``tmp_path``."""

    monkeypatch.chdir(tmp_path)
    for name in _GOLDRATES_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GOLDRATES_DATABASE", str(tmp_path / "rates.duckdb"))
    return tmp_path


@pytest.fixture
def vendors_with_urls(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = workspace / "vendors.toml"
    path.write_text(
        '[vendors.tttbullion]\nurl = "https://ttt.test/"\n\n[vendors.msgold]\nurl = "https://ms.test/"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("GOLDRATES_VENDORS_FILE", str(path))
    return path


def _json_rows(output: str, key: str) -> list[dict[str, object]]:
    rows = []
    for line in output.splitlines():
        if not line.startswith("{"):
            continue
        payload = json.loads(line)
        if key in payload:
            rows.append(payload)
    return rows


@pytest.fixture
def json_rows():
    """JSON lines from CLI output carrying a key; log lines are skipped."""

    return _json_rows

