# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .light_index import light_index_command

app = typer.Typer(
    name="packtrans",
    help="Pack translation tooling.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    """Pack translation tooling."""


app.command("light-index", help="Generate labels.json and titles.json from translation files.")(light_index_command)

__all__ = ["app"]
