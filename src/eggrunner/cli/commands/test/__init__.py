# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Test CLI command package."""

from __future__ import annotations

import typer

from .command import mocha_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the test command on the Typer application.

    Args:
        app: Typer application receiving the command.
    """

    app.command(name="test", help="Run the test suite with mocha.")(mocha_command)
