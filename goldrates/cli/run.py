"""Extraction commands: ``run``, ``watch`` and ``parse``."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from pathlib import Path

import typer

from goldrates.core.config.settings import GoldRatesConfig
from goldrates.core.coordinator import RunCoordinator
from goldrates.core.exceptions.base import FetchError, ProfileConfigError
from goldrates.core.exceptions.codes import ErrorCode
from goldrates.core.logging import logger
from goldrates.core.models.rates import ExtractionOutcome
from goldrates.core.models.vendors import VendorProfile
from goldrates.core.pipeline import NO_DATA_REASON, ExtractionPipeline
from goldrates.core.sources.base import PageSource
from goldrates.core.sources.browser import BrowserPageSource
from goldrates.core.sources.http import HttpPageSource
from goldrates.core.sources.markup import FilePageSource
from goldrates.core.storage.connection import DuckDBConnectionConfig
from goldrates.core.storage.rate_store import DuckDBRateStore

from .constants import RUN_FAILED_EXIT_CODE, VALIDATION_EXIT_CODE
from .utils import (
    OUTCOME_COLUMNS,
    RECORD_COLUMNS,
    emit_error,
    fail,
    get_cli_options,
    load_profiles,
    outcome_rows,
    prepare_output,
    record_rows,
    resolve_profile,
)


class SourceKind(str, Enum):
    BROWSER = "browser"
    HTTP = "http"
    FILE = "file"


def register(app: typer.Typer) -> None:
    """Register the extraction commands on the provided application."""

    app.command("run")(run_command)
    app.command("watch")(watch_command)
    app.command("parse")(parse_command)


def get_rate_store(config: GoldRatesConfig) -> DuckDBRateStore:
    """Factory hook for the rate store used by ``run`` and ``watch``."""

    return DuckDBRateStore(DuckDBConnectionConfig(database=config.storage.database))


def get_page_source(kind: SourceKind, config: GoldRatesConfig, file: Path | None = None) -> PageSource:
    """Factory hook for the page source used by ``run`` and ``watch``."""

    if kind is SourceKind.FILE:
        return FilePageSource(file)
    if kind is SourceKind.HTTP:
        return HttpPageSource()
    return BrowserPageSource(headless=config.fetch.headless, settle_delay=config.fetch.settle_delay)


def build_pipeline(config: GoldRatesConfig) -> ExtractionPipeline:
    return ExtractionPipeline(
        ready_timeout=config.fetch.ready_timeout,
        hard_timeout=config.fetch.hard_timeout,
    )


def run_command(
    ctx: typer.Context,
    vendors: list[str] | None = typer.Argument(
        None,
        help="Vendor ids to run; defaults to the configured default vendor.",
    ),
    all_vendors: bool = typer.Option(False, "--all", help="Run every configured vendor."),
    source: SourceKind = typer.Option(
        SourceKind.BROWSER,
        "--source",
        case_sensitive=False,
        help="How the vendor page is obtained.",
    ),
    file: Path | None = typer.Option(None, "--file", help="Saved HTML page used with --source file."),
) -> None:
    """Extract current rates and replace the stored snapshot for each vendor."""

    config = get_cli_options(ctx).config
    profiles = load_profiles(config)
    vendor_ids = _select_vendors(profiles, vendors, all_vendors, config)
    _check_source(profiles, vendor_ids, source, file)
    formatter, stream, stack, _ = prepare_output(ctx)

    store = get_rate_store(config)
    coordinator = RunCoordinator(
        profiles,
        _single_source(get_page_source(source, config, file)),
        store,
        build_pipeline(config),
    )
    try:
        outcomes = asyncio.run(coordinator.run_many(vendor_ids))
        formatter.render(outcome_rows(outcomes), stream=stream, columns=OUTCOME_COLUMNS)
    finally:
        store.close()
        stack.close()

    if not all(outcome.success for outcome in outcomes):
        raise typer.Exit(code=RUN_FAILED_EXIT_CODE)


def watch_command(
    ctx: typer.Context,
    vendors: list[str] | None = typer.Argument(
        None,
        help="Vendor ids to run; defaults to the configured default vendor.",
    ),
    all_vendors: bool = typer.Option(False, "--all", help="Run every configured vendor."),
    interval: float = typer.Option(300.0, "--interval", min=0, help="Seconds between runs."),
    iterations: int | None = typer.Option(
        None,
        "--iterations",
        min=1,
        help="Stop after this many rounds; runs until interrupted when omitted.",
    ),
    source: SourceKind = typer.Option(
        SourceKind.BROWSER,
        "--source",
        case_sensitive=False,
        help="How the vendor page is obtained.",
    ),
    file: Path | None = typer.Option(None, "--file", help="Saved HTML page used with --source file."),
) -> None:
    """Run the extraction periodically. Failed rounds are reported and the loop continues."""

    config = get_cli_options(ctx).config
    profiles = load_profiles(config)
    vendor_ids = _select_vendors(profiles, vendors, all_vendors, config)
    _check_source(profiles, vendor_ids, source, file)
    formatter, stream, stack, _ = prepare_output(ctx)

    store = get_rate_store(config)
    coordinator = RunCoordinator(
        profiles,
        _single_source(get_page_source(source, config, file)),
        store,
        build_pipeline(config),
    )

    def report(outcomes: Sequence[ExtractionOutcome]) -> None:
        formatter.render(outcome_rows(outcomes), stream=stream, columns=OUTCOME_COLUMNS)

    try:
        asyncio.run(_watch(coordinator, vendor_ids, interval, iterations, report))
    except KeyboardInterrupt:
        logger.info("Watch interrupted")
    finally:
        store.close()
        stack.close()


def parse_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Saved HTML page to extract."),
    vendor: str | None = typer.Option(
        None,
        "--vendor",
        help="Vendor profile to apply; defaults to the configured default vendor.",
    ),
) -> None:
    """Extract rates from a saved page and print them without touching the store."""

    config = get_cli_options(ctx).config
    profiles = load_profiles(config)
    profile = resolve_profile(profiles, vendor or config.default_vendor)

    pipeline = build_pipeline(config)
    try:
        tables = asyncio.run(pipeline.fetch(profile, FilePageSource(file)))
    except FetchError as error:
        fail(error, VALIDATION_EXIT_CODE)

    batch = pipeline.extract(tables, profile)
    if batch.is_empty:
        emit_error(NO_DATA_REASON, ErrorCode.EMPTY_BATCH.value, details={"vendor_id": profile.vendor_id})
        raise typer.Exit(code=RUN_FAILED_EXIT_CODE)

    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        formatter.render(record_rows(batch.records), stream=stream, columns=RECORD_COLUMNS)
    finally:
        stack.close()


async def _watch(
    coordinator: RunCoordinator,
    vendor_ids: Sequence[str],
    interval: float,
    iterations: int | None,
    report: Callable[[Sequence[ExtractionOutcome]], None],
) -> None:
    completed = 0
    while iterations is None or completed < iterations:
        report(await coordinator.run_many(vendor_ids))
        completed += 1
        if iterations is None or completed < iterations:
            await asyncio.sleep(interval)


def _single_source(page_source: PageSource) -> Callable[[VendorProfile], PageSource]:
    return lambda _profile: page_source


def _select_vendors(
    profiles: Mapping[str, VendorProfile],
    vendors: Sequence[str] | None,
    all_vendors: bool,
    config: GoldRatesConfig,
) -> list[str]:
    if all_vendors:
        return list(profiles)
    selected = list(dict.fromkeys(vendors or [config.default_vendor]))
    for vendor_id in selected:
        resolve_profile(profiles, vendor_id)
    return selected


def _check_source(
    profiles: Mapping[str, VendorProfile],
    vendor_ids: Sequence[str],
    source: SourceKind,
    file: Path | None,
) -> None:
    if source is SourceKind.FILE:
        if file is None:
            emit_error("--file is required with --source file.", "FILE_REQUIRED")
            raise typer.Exit(code=VALIDATION_EXIT_CODE)
        return
    for vendor_id in vendor_ids:
        if not profiles[vendor_id].url:
            fail(
                ProfileConfigError(
                    f"Vendor '{vendor_id}' has no URL configured; set it in the vendors file.",
                    vendor_id=vendor_id,
                ),
                VALIDATION_EXIT_CODE,
            )


__all__ = [
    "SourceKind",
    "build_pipeline",
    "get_page_source",
    "get_rate_store",
    "parse_command",
    "register",
    "run_command",
    "watch_command",
]
