"""Commands reading the stored rate snapshots."""

from __future__ import annotations

import typer

from goldrates.core.exceptions.base import StoreError

from . import run as run_module
from .constants import SYSTEM_EXIT_CODE
from .utils import RECORD_COLUMNS, fail, get_cli_options, load_profiles, prepare_output, record_rows, resolve_profile

rates_app = typer.Typer(help="Stored rate snapshots.")


def register(app: typer.Typer) -> None:
    """Register the rates command group on the provided application."""

    app.add_typer(rates_app, name="rates", help="Inspect stored rate snapshots")


@rates_app.command("show")
def show_command(
    ctx: typer.Context,
    vendor: str = typer.Argument(..., help="Vendor id."),
    category: str | None = typer.Option(None, "--category", help="Only show one category."),
) -> None:
    """Print the current stored snapshot for a vendor."""

    config = get_cli_options(ctx).config
    profile = resolve_profile(load_profiles(config), vendor)
    if category is not None and category not in profile.category_signatures:
        allowed = ", ".join(profile.category_signatures)
        raise typer.BadParameter(
            f"Unknown category '{category}' for {vendor}. Allowed values: {allowed}",
            param_hint="--category",
        )

    store = run_module.get_rate_store(config)
    try:
        records = store.snapshot(profile.vendor_id, category)
    except StoreError as error:
        fail(error, SYSTEM_EXIT_CODE)
    finally:
        store.close()

    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        formatter.render(
            record_rows(records),
            stream=stream,
            columns=RECORD_COLUMNS,
            title=f"{profile.display_name} rates",
        )
    finally:
        stack.close()


__all__ = ["rates_app", "register", "show_command"]
