"""Utility helpers shared across CLI commands."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable, Mapping, Sequence
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn, TextIO

import typer

from goldrates.core.config.settings import GoldRatesConfig
from goldrates.core.exceptions.base import GoldRatesError, ProfileConfigError
from goldrates.core.models.rates import ExtractionOutcome, RateRecord
from goldrates.core.models.vendors import VendorProfile
from goldrates.core.vendors.loader import get_profile, load_vendor_profiles

from .constants import VALIDATION_EXIT_CODE
from .formatters import OutputFormatter, create_formatter

RECORD_COLUMNS = ["vendor_id", "category", "detail_name", "we_buy", "we_sell", "purity"]
OUTCOME_COLUMNS = ["vendor_id", "success", "records", "categories", "reason"]


@dataclass(slots=True)
class CLIOptions:
    """Resolved options derived from the Typer context."""

    format: str = "table"
    output_path: Path | None = None
    no_color: bool = False
    config: GoldRatesConfig = field(default_factory=GoldRatesConfig)


def get_cli_options(ctx: typer.Context) -> CLIOptions:
    """Extract :class:`CLIOptions` from the Typer context object."""

    ctx.ensure_object(dict)
    data = ctx.obj or {}
    return CLIOptions(
        format=str(data.get("format", "table")),
        output_path=data.get("output_path"),
        no_color=bool(data.get("no_color", False)),
        config=data.get("config") or GoldRatesConfig(),
    )


def prepare_output(ctx: typer.Context) -> tuple[OutputFormatter, TextIO, ExitStack, CLIOptions]:
    """Resolve formatter and writable stream for the current command."""

    options = get_cli_options(ctx)
    formatter = create_formatter(options.format, no_color=options.no_color)

    stack = ExitStack()
    stream: TextIO
    if options.output_path is not None:
        try:
            stream = stack.enter_context(open(options.output_path, "w", encoding="utf-8"))
        except OSError as exc:
            stack.close()
            emit_error(f"Unable to open '{options.output_path}': {exc}", "OUTPUT_WRITE_ERROR")
            raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc
    else:
        stream = sys.stdout

    return formatter, stream, stack, options


def emit_error(message: str, code: str, *, details: Mapping[str, object] | None = None) -> None:
    """Print a structured error payload to stderr."""

    payload: dict[str, object] = {"code": code, "message": message}
    if details:
        payload["details"] = _sanitize_details(details)
    typer.echo(json.dumps(payload, ensure_ascii=False, default=str), err=True)


def fail(error: GoldRatesError, exit_code: int) -> NoReturn:
    """Report ``error`` and leave the command with ``exit_code``."""

    emit_error(error.message, error.error_code, details=error.details)
    raise typer.Exit(code=exit_code) from error


def _sanitize_details(details: Mapping[str, object]) -> Mapping[str, object]:
    sanitized: dict[str, object] = {}
    for key, value in details.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            sanitized[key] = value
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            sanitized[key] = [str(item) for item in value]
        else:
            sanitized[key] = str(value)
    return sanitized


def load_profiles(config: GoldRatesConfig) -> dict[str, VendorProfile]:
    """Built-in profiles merged with the configured vendors file."""

    try:
        return load_vendor_profiles(config.vendors_file)
    except ProfileConfigError as error:
        fail(error, VALIDATION_EXIT_CODE)


def resolve_profile(profiles: Mapping[str, VendorProfile], vendor_id: str) -> VendorProfile:
    try:
        return get_profile(profiles, vendor_id)
    except ProfileConfigError as error:
        fail(error, VALIDATION_EXIT_CODE)


def record_rows(records: Iterable[RateRecord]) -> list[dict[str, object]]:
    return [record.model_dump(mode="json") for record in records]


def outcome_rows(outcomes: Iterable[ExtractionOutcome]) -> list[dict[str, object]]:
    return [
        {
            "vendor_id": outcome.vendor_id,
            "success": outcome.success,
            "records": outcome.record_count,
            "categories": list(outcome.categories_written),
            "reason": outcome.reason,
        }
        for outcome in outcomes
    ]


__all__ = [
    "CLIOptions",
    "OUTCOME_COLUMNS",
    "RECORD_COLUMNS",
    "emit_error",
    "fail",
    "get_cli_options",
    "load_profiles",
    "outcome_rows",
    "prepare_output",
    "record_rows",
    "resolve_profile",
]
