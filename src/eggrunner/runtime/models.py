# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models produced by the runtime environment resolver."""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from ..constants import NODE_OPTIONS_ENV
from ..manifest import PackageManifest


@dataclass(slots=True)
class RuntimeEnvironment:
    """Environment overlay plus accumulated runtime flags for the child process.

    ``node_options`` travels through ``NODE_OPTIONS``; ``exec_argv`` holds
    flags Node only accepts on its command line (``--security-revert``).
    Both lists are append-only.
    """

    env: dict[str, str] = field(default_factory=dict)
    node_options: list[str] = field(default_factory=list)
    exec_argv: list[str] = field(default_factory=list)

    def add_node_option(self, option: str) -> None:
        """Append ``option`` to the runtime flags unless already present."""

        if option not in self.node_options:
            self.node_options.append(option)

    def add_exec_arg(self, arg: str) -> None:
        """Append ``arg`` to the command-line runtime flags unless already present."""

        if arg not in self.exec_argv:
            self.exec_argv.append(arg)

    def set_env(self, key: str, value: str) -> None:
        self.env[key] = value

    def copy(self) -> RuntimeEnvironment:
        return RuntimeEnvironment(
            env=dict(self.env),
            node_options=list(self.node_options),
            exec_argv=list(self.exec_argv),
        )

    def node_options_value(self, inherited: str | None = None) -> str:
        """Return the ``NODE_OPTIONS`` value with our flags appended to ``inherited``.

        Args:
            inherited: ``NODE_OPTIONS`` value already present in the base environment.

        Returns:
            str: Space-joined option string.
        """

        parts = [inherited.strip()] if inherited and inherited.strip() else []
        present = _split_node_options(inherited or "")
        for option in self.node_options:
            tokens = _split_node_options(option)
            if tokens and _contains_run(present, tokens):
                continue
            parts.append(option)
        return " ".join(parts)

    def merged_env(self, base: Mapping[str, str]) -> dict[str, str]:
        """Return ``base`` updated with the overlay; the overlay wins.

        Args:
            base: Inherited process environment.

        Returns:
            dict[str, str]: Environment handed to the child process.
        """

        merged = dict(base)
        merged.update(self.env)
        options = self.node_options_value(merged.get(NODE_OPTIONS_ENV))
        if options:
            merged[NODE_OPTIONS_ENV] = options
        return merged


def quote_node_option_path(flag: str, value: str) -> str:
    """Return ``"<flag> <value>"``; ``NODE_OPTIONS`` only understands double quotes."""

    if any(char.isspace() for char in value):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'{flag} "{escaped}"'
    return f"{flag} {value}"


def _split_node_options(value: str) -> list[str]:
    try:
        return shlex.split(value)
    except ValueError:
        return value.split()


def _contains_run(tokens: list[str], run: list[str]) -> bool:
    """Return whether ``run`` appears in ``tokens`` as consecutive whole tokens."""

    width = len(run)
    return any(tokens[index : index + width] == run for index in range(len(tokens) - width + 1))


@dataclass(frozen=True, slots=True)
class ProbeDecision:
    """Trace entry recording which probe settled a cascade."""

    probe: str
    value: bool | None


@dataclass(frozen=True, slots=True)
class RuntimeResolution:
    """Immutable outcome of runtime environment resolution.

    The command layer reads these values instead of having the resolver write
    back onto its options.
    """

    base_dir: Path
    manifest: PackageManifest
    typescript: bool
    is_esm: bool
    environment: RuntimeEnvironment
    tscompiler: Path | None = None
    declarations: bool = False
    timeout_override: int | None = None
    decisions: tuple[ProbeDecision, ...] = ()

    @property
    def extension(self) -> str:
        """Return the test-file suffix for the resolved language variant."""

        return "ts" if self.typescript else "js"


__all__ = [
    "ProbeDecision",
    "RuntimeEnvironment",
    "RuntimeResolution",
    "quote_node_option_path",
]
