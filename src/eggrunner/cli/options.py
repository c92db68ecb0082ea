# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Option aliases and structures shared by every command."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..runtime.resolver import RuntimeRequest

BASE_OPTION = Annotated[
    Path | None,
    typer.Option("--base", "--baseDir", help="Directory of the application, default to the current directory."),
]
REQUIRE_OPTION = Annotated[
    list[str] | None,
    typer.Option("--require", "-r", help="Require the given module (repeatable)."),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", "-d", help="Show the full command line without running it."),
]
TYPESCRIPT_OPTION = Annotated[
    bool | None,
    typer.Option("--typescript/--no-typescript", help="Force or disable the TypeScript toolchain."),
]
LEGACY_TS_OPTION = Annotated[
    str | None,
    typer.Option("--ts", help="Deprecated; 'true' or 'false', same as --typescript/--no-typescript."),
]
TSCOMPILER_OPTION = Annotated[
    str | None,
    typer.Option("--tscompiler", help="TypeScript compiler register module, default to ts-node/register."),
]
DECLARATIONS_OPTION = Annotated[
    bool | None,
    typer.Option("--declarations/--no-declarations", "--dts", help="Generate typings with egg-ts-helper first."),
]
INSPECT_OPTION = Annotated[
    bool,
    typer.Option("--inspect", help="Activate the Node.js inspector."),
]
INSPECT_BRK_OPTION = Annotated[
    bool,
    typer.Option("--inspect-brk", help="Activate the inspector and break before user code starts."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Emit debug logging."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]


def normalize_cli_values(values: Sequence[str] | None) -> tuple[str, ...]:
    """Return sanitized CLI values preserving order."""

    if not values:
        return ()
    return tuple(entry.strip() for entry in values if entry and entry.strip())


@dataclass(slots=True)
class CommonOptions:
    """Options accepted by every command."""

    base: Path
    requires: tuple[str, ...]
    dry_run: bool
    typescript: bool | None
    legacy_ts: str | None
    tscompiler: str | None
    declarations: bool | None
    inspect: bool
    inspect_brk: bool
    debug: bool
    emoji: bool

    def runtime_request(self, *, command_default: bool | None = False) -> RuntimeRequest:
        """Return the runtime-related subset of the options."""

        return RuntimeRequest(
            typescript=self.typescript,
            legacy_ts=self.legacy_ts,
            tscompiler=self.tscompiler,
            declarations=self.declarations,
            inspect=self.inspect,
            inspect_brk=self.inspect_brk,
            command_default=command_default,
        )


def build_common_options(
    *,
    base: Path | None,
    require: Sequence[str] | None,
    dry_run: bool,
    typescript: bool | None,
    ts: str | None,
    tscompiler: str | None,
    declarations: bool | None,
    inspect: bool,
    inspect_brk: bool,
    debug: bool,
    emoji: bool,
) -> CommonOptions:
    """Construct :class:`CommonOptions` from Typer callback parameters."""

    return CommonOptions(
        base=(base or Path.cwd()).expanduser(),
        requires=normalize_cli_values(require),
        dry_run=dry_run,
        typescript=typescript,
        legacy_ts=ts.strip() if ts else None,
        tscompiler=tscompiler.strip() if tscompiler and tscompiler.strip() else None,
        declarations=declarations,
        inspect=inspect,
        inspect_brk=inspect_brk,
        debug=debug,
        emoji=emoji,
    )


__all__ = [
    "BASE_OPTION",
    "CommonOptions",
    "DEBUG_OPTION",
    "DECLARATIONS_OPTION",
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "INSPECT_BRK_OPTION",
    "INSPECT_OPTION",
    "LEGACY_TS_OPTION",
    "REQUIRE_OPTION",
    "TSCOMPILER_OPTION",
    "TYPESCRIPT_OPTION",
    "build_common_options",
    "normalize_cli_values",
]
