"""Pytest configuration for the goldrates test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from goldrates.core.exceptions.base import FetchError, FetchErrorKind, StoreError, StoreErrorKind
from goldrates.core.models.rates import RateRecord
from goldrates.core.models.tables import RawTable


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--goldrates-run-integration",
        action="store_true",
        default=False,
        help="Run goldrates integration tests that launch a browser or hit vendor sites.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: marks goldrates tests requiring a browser or network access",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--goldrates-run-integration"):
        return

    skip_integration = pytest.mark.skip(
        reason="integration tests require --goldrates-run-integration",
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


class StubPageSource:
    """Page source returning canned tables or raising a canned error."""

    def __init__(self, tables: Sequence[RawTable] = (), error: FetchError | None = None) -> None:
        self.tables = list(tables)
        self.error = error
        self.calls: list[tuple[str, float]] = []

    async def fetch(self, url: str, ready_timeout: float) -> list[RawTable]:
        self.calls.append((url, ready_timeout))
        if self.error is not None:
            raise self.error
        return list(self.tables)


class RecordingRateStore:
    """In-memory rate store recording every replace call."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[tuple[str, str, list[RateRecord]]] = []
        self.rows: dict[tuple[str, str], list[RateRecord]] = {}
        self.closed = False

    def replace(self, vendor_id: str, category: str, records: Sequence[RateRecord]) -> None:
        self.calls.append((vendor_id, category, list(records)))
        if category == self.fail_on:
            raise StoreError("database unavailable", StoreErrorKind.CONNECTION_FAILED, vendor_id, category)
        self.rows[(vendor_id, category)] = list(records)

    def snapshot(self, vendor_id: str, category: str | None = None) -> list[RateRecord]:
        return [
            record
            for (stored_vendor, stored_category), records in self.rows.items()
            if stored_vendor == vendor_id and category in (None, stored_category)
            for record in records
        ]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def page_source_factory() -> Callable[..., StubPageSource]:
    return StubPageSource


@pytest.fixture
def rate_store() -> RecordingRateStore:
    return RecordingRateStore()


@pytest.fixture
def failing_rate_store() -> Callable[[str], RecordingRateStore]:
    return lambda category: RecordingRateStore(fail_on=category)


@pytest.fixture
def fetch_timeout() -> FetchError:
    return FetchError("page not ready", FetchErrorKind.TIMEOUT, url="https://vendor.test/rates")


@pytest.fixture
def ttt_tables() -> list[RawTable]:
    return [
        RawTable.from_rows(
            [
                ["Gold", "We Buy", "We Sell"],
                ["Gold 1g", "250.10", "255.00"],
                ["Gold 10g", "2,501.00", "2,550.00"],
            ]
        ),
        RawTable.from_rows(
            [
                ["Silver", "We Buy", "We Sell"],
                ["Silver 1kg", "3,100.00", "3,300.00"],
            ]
        ),
    ]


@pytest.fixture
def msgold_tables() -> list[RawTable]:
    return [
        RawTable.from_rows([["Announcement: prices updated hourly"]]),
        RawTable.from_rows(
            [
                ["DETAILS", "WE BUY", "WE SELL"],
                ["999.9 Gold USD / oz", "2,310.50", "2,350.75"],
                ["999.9 Gold MYR / kg", "348,000", "352,500"],
                ["999.9 Gold MYR / g", "348.00", "352.50"],
                ["USD / MYR", "4.70", "4.75"],
            ]
        ),
        RawTable.from_rows(
            [
                ["DETAILS", "WE BUY"],
                ["Gold 999 jewellery", "330.00"],
                ["Gold 916  jewellery", "300.50"],
                ["Gold 750", "240"],
            ]
        ),
    ]
