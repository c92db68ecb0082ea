# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

from .commands import register_commands
from .typer_ext import create_typer

app = create_typer(
    name="eggrunner",
    help="Test, coverage and development runner for egg applications.",
    no_args_is_help=True,
    add_completion=False,
)
register_commands(app)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
