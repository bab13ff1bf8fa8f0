"""Vendor profile listing."""

from __future__ import annotations

import typer

from .utils import get_cli_options, load_profiles, prepare_output

VENDOR_COLUMNS = ["vendor_id", "display_name", "url", "categories", "header_skip", "primary_category"]


def register(app: typer.Typer) -> None:
    app.command("vendors")(vendors_command)


def vendors_command(ctx: typer.Context) -> None:
    """List the configured vendor profiles."""

    profiles = load_profiles(get_cli_options(ctx).config)
    rows = [
        {
            "vendor_id": profile.vendor_id,
            "display_name": profile.display_name,
            "url": profile.url or None,
            "categories": [signature.tag for signature in profile.categories],
            "header_skip": profile.header_skip.value,
            "primary_category": profile.primary_category,
        }
        for profile in profiles.values()
    ]

    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        formatter.render(rows, stream=stream, columns=VENDOR_COLUMNS)
    finally:
        stack.close()


__all__ = ["register", "vendors_command"]
