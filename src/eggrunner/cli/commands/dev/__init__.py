# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Dev CLI command package."""

from __future__ import annotations

import typer

from .command import dev_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the dev command on the Typer application.

    Args:
        app: Typer application receiving the command.
    """

    app.command(name="dev", help="Start the server in local development mode.")(dev_command)
