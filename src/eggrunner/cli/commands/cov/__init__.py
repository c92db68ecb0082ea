# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Coverage CLI command package."""

from __future__ import annotations

import typer

from .command import cov_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the cov command on the Typer application.

    Args:
        app: Typer application receiving the command.
    """

    app.command(name="cov", help="Run the test suite with c8 coverage.")(cov_command)
