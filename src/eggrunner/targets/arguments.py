# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build the mocha argument vector."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..constants import (
    MOCHAWESOME_MODULE,
    MOCHAWESOME_REGISTER_MODULE,
    MOCHAWESOME_REPORTER_OPTIONS,
    MOCK_REGISTER_MODULE,
)
from ..context import split_csv
from ..manifest import PackageManifest, ProjectKind, detect_project_kind
from ..modules import try_import_resolve

LOGGER = logging.getLogger(__name__)

DISABLED_TIMEOUTS = frozenset({"", "0", "false"})


@dataclass(frozen=True, slots=True)
class MochaArguments:
    """Mocha flag values in the order they are emitted."""

    dry_run: bool = False
    bail: bool = False
    grep: tuple[str, ...] = ()
    timeout: str | None = None
    parallel: bool = False
    jobs: int | None = None
    reporter: str | None = None
    reporter_options: str | None = None
    requires: tuple[str, ...] = ()
    files: tuple[str, ...] = ()

    def to_argv(self) -> list[str]:
        """Return the argument vector with blank entries dropped.

        Returns:
            list[str]: Arguments for ``_mocha``.
        """

        argv = [
            "--dry-run" if self.dry_run else "",
            "--exit",
            "--bail" if self.bail else "",
            *(f"--grep={pattern}" for pattern in self.grep),
            self._timeout_arg(),
        ]
        if self.parallel and self.jobs:
            argv.extend(("--parallel", f"--jobs={self.jobs}"))
        argv.append(f"--reporter={self.reporter}" if self.reporter else "")
        argv.append(f"--reporter-options={self.reporter_options}" if self.reporter_options else "")
        argv.extend(f"--require={module}" for module in self.requires)
        argv.extend(self.files)
        return [arg for arg in argv if arg.strip()]

    def _timeout_arg(self) -> str:
        if self.timeout is None or self.timeout.strip() in DISABLED_TIMEOUTS:
            return "--no-timeout"
        return f"--timeout={self.timeout.strip()}"


@dataclass(frozen=True, slots=True)
class ReporterChoice:
    """Reporter flags plus the register hook mochawesome needs in parallel mode."""

    reporter: str | None = None
    options: str | None = None
    requires: tuple[str, ...] = ()


def split_grep(values: Iterable[str]) -> tuple[str, ...]:
    """Flatten ``--grep`` values, splitting comma-separated entries."""

    patterns: list[str] = []
    for value in values:
        patterns.extend(split_csv(value))
    return tuple(patterns)


def effective_timeout(flag_value: str | None, override: int | None) -> str | None:
    """Return the timeout to emit; an inspector override disables it.

    Args:
        flag_value: ``--timeout`` value (``None`` when ``--no-timeout``).
        override: Timeout override from runtime resolution.

    Returns:
        str | None: Timeout in milliseconds, or ``None`` for no timeout.
    """

    if override == 0:
        return None
    return flag_value


def resolve_reporter(
    *,
    env_reporter: str | None,
    mochawesome: bool,
    parallel: bool,
    paths: Sequence[Path],
) -> ReporterChoice:
    """Pick the mocha reporter.

    Args:
        env_reporter: ``TEST_REPORTER`` value; wins when set.
        mochawesome: Whether the bundled HTML reporter is enabled.
        parallel: Mocha parallel mode.
        paths: Search paths for the reporter modules.

    Returns:
        ReporterChoice: Reporter flags. A reporter that cannot be located is
        omitted.
    """

    if env_reporter:
        return ReporterChoice(reporter=env_reporter)
    if not mochawesome:
        return ReporterChoice()
    reporter = try_import_resolve(MOCHAWESOME_MODULE, paths=paths)
    if reporter is None:
        LOGGER.warning("reporter %s not found, using the mocha default", MOCHAWESOME_MODULE)
        return ReporterChoice()
    requires: tuple[str, ...] = ()
    if parallel:
        register = try_import_resolve(MOCHAWESOME_REGISTER_MODULE, paths=paths)
        if register is not None:
            requires = (str(register),)
    return ReporterChoice(reporter=str(reporter), options=MOCHAWESOME_REPORTER_OPTIONS, requires=requires)


def collect_requires(
    flag_requires: Iterable[str],
    manifest: PackageManifest,
    base_dir: Path,
    *,
    auto_mock: bool = True,
) -> list[str]:
    """Return modules to preload: flags, ``egg.require``, then the mock register.

    Args:
        flag_requires: ``--require`` values.
        manifest: Project manifest.
        base_dir: Project root used to resolve the mock register.
        auto_mock: Whether to add ``@eggjs/mock/register`` for applications.

    Returns:
        list[str]: Unique module specifiers or paths in load order.
    """

    requires: list[str] = []
    for module in (*flag_requires, *manifest.egg.requires):
        if module and module not in requires:
            requires.append(module)
    if auto_mock and detect_project_kind(manifest) is ProjectKind.APPLICATION:
        mock_register = try_import_resolve(MOCK_REGISTER_MODULE, paths=[base_dir])
        if mock_register is None:
            LOGGER.debug("auto register %s skipped for %s", MOCK_REGISTER_MODULE, base_dir)
        elif str(mock_register) not in requires:
            requires.append(str(mock_register))
    return requires


__all__ = [
    "MochaArguments",
    "ReporterChoice",
    "collect_requires",
    "effective_timeout",
    "resolve_reporter",
    "split_grep",
]
