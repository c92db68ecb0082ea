# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Option aliases and structures for the cov command."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Annotated

import typer

from ....constants import DEFAULT_C8_ARGS
from ...options import normalize_cli_values
from ..test.models import MochaCLIOptions

PREREQUIRE_OPTION = Annotated[
    bool,
    typer.Option("--prerequire", help="Prerequire files for coverage instrumentation."),
]
EXCLUDE_OPTION = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-x", help="Coverage ignore pattern (repeatable)."),
]
C8_OPTION = Annotated[
    str,
    typer.Option("--c8", help="Arguments passed through to c8."),
]


@dataclass(slots=True)
class CovCLIOptions:
    """Test options plus the coverage-specific overrides."""

    mocha: MochaCLIOptions
    prerequire: bool
    excludes: tuple[str, ...]
    c8_args: str


def build_cov_options(
    mocha: MochaCLIOptions,
    *,
    prerequire: bool,
    exclude: Sequence[str] | None,
    c8: str | None,
) -> CovCLIOptions:
    """Construct :class:`CovCLIOptions` from Typer callback parameters."""

    return CovCLIOptions(
        mocha=mocha,
        prerequire=prerequire,
        excludes=normalize_cli_values(exclude),
        c8_args=c8 if c8 is not None else DEFAULT_C8_ARGS,
    )


__all__ = ["C8_OPTION", "CovCLIOptions", "EXCLUDE_OPTION", "PREREQUIRE_OPTION", "build_cov_options"]
