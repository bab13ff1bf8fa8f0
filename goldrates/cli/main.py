"""Main entry point for the goldrates command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from goldrates.core.config.settings import ConfigManager
from goldrates.core.exceptions.base import ConfigError
from goldrates.core.logging import LogConfig, StructuredLogger

from .constants import VALIDATION_EXIT_CODE
from .formatters import create_formatter
from .rates import register as register_rates_commands
from .run import register as register_run_commands
from .utils import fail
from .vendors import register as register_vendor_commands


def create_app() -> typer.Typer:
    """Create a Typer application instance for goldrates."""

    app = typer.Typer(add_completion=False, help="Precious metal rate extraction")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            help="Logging level; defaults to the configured level.",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="TOML configuration file (default: ./goldrates.toml).",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        if config_path is not None and not config_path.exists():
            fail(ConfigError("Configuration file does not exist.", path=str(config_path)), VALIDATION_EXIT_CODE)
        try:
            config = ConfigManager(config_path).get_config()
        except ConfigError as error:
            fail(error, VALIDATION_EXIT_CODE)

        log_config = LogConfig.from_settings(config.logging, log_level)
        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "log_level": log_config.level,
                "no_color": no_color,
                "config": config,
            }
        )
        try:
            StructuredLogger(log_config)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    register_run_commands(app)
    register_vendor_commands(app)
    register_rates_commands(app)
    return app


app = create_app()
