# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Invocation context shared by every resolver of a single command run."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from . import constants
from .bool_utils import parse_strict_bool

OptionsT = TypeVar("OptionsT")


def split_csv(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated value, dropping blank entries.

    Args:
        value: Raw comma-separated string or ``None``.

    Returns:
        tuple[str, ...]: Trimmed, non-empty entries in their original order.
    """

    if not value:
        return ()
    return tuple(entry.strip() for entry in value.split(",") if entry.strip())


class RunnerSettings(BaseModel):
    """Settings read from the inherited environment, parsed once per command."""

    model_config = ConfigDict(frozen=True)

    test_timeout: str = constants.DEFAULT_TEST_TIMEOUT
    test_reporter: str | None = None
    tests: tuple[str, ...] = ()
    coverage_excludes: tuple[str, ...] = ()
    default_port: int = constants.DEFAULT_PORT
    ts_compiler: str | None = None
    typescript: bool | None = None
    ide_debug: bool = False
    mocha_file: str | None = None
    node_home: Path = constants.PACKAGE_ROOT
    debug: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> RunnerSettings:
        """Build settings from an environment snapshot.

        Args:
            env: Environment mapping, usually a copy of ``os.environ``.

        Returns:
            RunnerSettings: Parsed settings; malformed numbers fall back to defaults.
        """

        try:
            default_port = int(env.get(constants.DEFAULT_PORT_ENV, constants.DEFAULT_PORT))
        except ValueError:
            default_port = constants.DEFAULT_PORT
        node_home = env.get(constants.NODE_HOME_ENV)
        return cls(
            test_timeout=env.get(constants.TEST_TIMEOUT_ENV) or constants.DEFAULT_TEST_TIMEOUT,
            test_reporter=env.get(constants.TEST_REPORTER_ENV) or None,
            tests=split_csv(env.get(constants.TESTS_ENV)),
            coverage_excludes=split_csv(env.get(constants.COV_EXCLUDES_ENV)),
            default_port=default_port,
            ts_compiler=env.get(constants.TS_COMPILER_ENV) or None,
            typescript=parse_strict_bool(env.get(constants.TYPESCRIPT_ENV)),
            ide_debug=bool(env.get(constants.JB_DEBUG_FILE_ENV)),
            mocha_file=env.get(constants.MOCHA_FILE_ENV) or None,
            node_home=Path(node_home) if node_home else constants.PACKAGE_ROOT,
            debug=parse_strict_bool(env.get(constants.DEBUG_ENV)) is True,
        )


@dataclass(frozen=True, slots=True)
class InvocationContext(Generic[OptionsT]):
    """Immutable snapshot of one command run.

    Attributes:
        base_dir: Absolute project root.
        options: Per-command options dataclass built from CLI flags.
        env: Read-only snapshot of the inherited process environment.
        settings: Settings parsed from ``env``.
    """

    base_dir: Path
    options: OptionsT
    env: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(os.environ)))
    settings: RunnerSettings = field(default_factory=RunnerSettings)

    @classmethod
    def create(
        cls,
        base_dir: Path,
        options: OptionsT,
        env: Mapping[str, str] | None = None,
    ) -> InvocationContext[OptionsT]:
        """Snapshot ``env`` (default ``os.environ``) and derive settings.

        Args:
            base_dir: Project root; resolved to an absolute path.
            options: Per-command options.
            env: Optional environment mapping to snapshot.

        Returns:
            InvocationContext: Frozen context for the command run.
        """

        snapshot = MappingProxyType(dict(os.environ if env is None else env))
        return cls(
            base_dir=base_dir.expanduser().resolve(),
            options=options,
            env=snapshot,
            settings=RunnerSettings.from_env(snapshot),
        )


__all__ = ["InvocationContext", "RunnerSettings", "split_csv"]
