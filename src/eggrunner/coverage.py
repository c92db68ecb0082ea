# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Assemble the c8 coverage wrapper invocation."""

from __future__ import annotations

import logging
import shlex
import shutil
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .constants import C8_OUTPUT_DIR, COVERAGE_DIR, DEFAULT_COVERAGE_EXCLUDES, SPAWN_WRAP_SHIM_ROOT_ENV

LOGGER = logging.getLogger(__name__)


def merge_excludes(*groups: Iterable[str]) -> list[str]:
    """Return the union of ``groups`` in first-seen order, blanks dropped."""

    merged: list[str] = []
    for group in groups:
        for pattern in group:
            stripped = pattern.strip()
            if stripped and stripped not in merged:
                merged.append(stripped)
    return merged


@dataclass(frozen=True, slots=True)
class CoveragePlan:
    """c8 arguments plus the environment entries the wrapper needs.

    Attributes:
        args: Arguments passed to ``c8`` before the wrapped command.
        env: Environment entries added for the child.
    """

    args: tuple[str, ...]
    env: tuple[tuple[str, str], ...] = ()


def build_coverage_plan(
    base_dir: Path,
    *,
    c8_args: str,
    typescript: bool,
    env_excludes: Sequence[str] = (),
    flag_excludes: Sequence[str] = (),
) -> CoveragePlan:
    """Return c8 arguments for the project.

    Args:
        base_dir: Project root.
        c8_args: Passthrough ``--c8`` string, split shell-style.
        typescript: Whether ``.ts`` sources must be instrumented.
        env_excludes: Patterns from ``COV_EXCLUDES``.
        flag_excludes: ``--exclude`` values.

    Returns:
        CoveragePlan: Arguments and environment for the wrapper.
    """

    args = shlex.split(c8_args) if c8_args else []
    env: list[tuple[str, str]] = []
    if typescript:
        args.extend(("--extension", ".ts"))
        env.append((SPAWN_WRAP_SHIM_ROOT_ENV, str(base_dir / "node_modules")))
    for pattern in merge_excludes(env_excludes, DEFAULT_COVERAGE_EXCLUDES, flag_excludes):
        args.extend(("-x", pattern))
    return CoveragePlan(args=tuple(args), env=tuple(env))


def clean_coverage_output(base_dir: Path) -> None:
    """Remove c8 temporary output and previous reports under ``base_dir``."""

    for relative in (C8_OUTPUT_DIR, COVERAGE_DIR):
        target = base_dir / relative
        if target.is_dir():
            LOGGER.debug("removing %s", target)
            shutil.rmtree(target)
        elif target.exists():
            target.unlink()


__all__ = ["CoveragePlan", "build_coverage_plan", "clean_coverage_output", "merge_excludes"]
