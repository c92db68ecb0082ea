# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Option aliases and structures for the dev command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import typer

from ...options import CommonOptions

PORT_OPTION = Annotated[
    int | None,
    typer.Option("--port", "-p", min=1, max=65535, help="Listening port, default to 7001."),
]
WORKERS_OPTION = Annotated[
    int,
    typer.Option("--workers", "-c", "--cluster", min=1, help="Number of app workers."),
]
FRAMEWORK_OPTION = Annotated[
    str | None,
    typer.Option("--framework", help='Framework absolute path or npm package, default to "egg".'),
]
STICKY_OPTION = Annotated[
    bool,
    typer.Option("--sticky", help="Start a sticky cluster server."),
]


@dataclass(slots=True)
class DevCLIOptions:
    """Capture CLI overrides supplied to the dev command."""

    common: CommonOptions
    port: int | None
    workers: int
    framework: str | None
    sticky: bool


def build_dev_options(
    common: CommonOptions,
    *,
    port: int | None,
    workers: int,
    framework: str | None,
    sticky: bool,
) -> DevCLIOptions:
    """Construct :class:`DevCLIOptions` from Typer callback parameters."""

    return DevCLIOptions(
        common=common,
        port=port,
        workers=workers,
        framework=framework.strip() if framework and framework.strip() else None,
        sticky=sticky,
    )


__all__ = [
    "DevCLIOptions",
    "FRAMEWORK_OPTION",
    "PORT_OPTION",
    "STICKY_OPTION",
    "WORKERS_OPTION",
    "build_dev_options",
]
