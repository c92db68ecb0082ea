# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Select the ordered list of test files handed to mocha."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from ..constants import STANDING_EXCLUDES, TEST_DIR
from ..context import split_csv
from ..discovery.git import ChangedFilesDiscovery
from ..discovery.patterns import expand_patterns

LOGGER = logging.getLogger(__name__)

NO_CHANGED_FILES_MESSAGE = "No changed test files"


class TargetOutcome(StrEnum):
    """Result of file selection."""

    FILES = "files"
    NO_FILES = "no_files"
    NO_CHANGED_FILES = "no_changed_files"


class TargetTier(StrEnum):
    """Source that supplied the patterns."""

    EXPLICIT = "explicit"
    CHANGED = "changed"
    ENVIRONMENT = "environment"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class TargetFileSet:
    """Ordered, unique test files plus the patterns that produced them.

    Attributes:
        files: Project-relative posix paths; the setup file comes first.
        patterns: Patterns expanded, negations included.
        tier: Source of the patterns.
        outcome: ``FILES`` or one of the early-exit outcomes.
    """

    files: tuple[str, ...]
    patterns: tuple[str, ...]
    tier: TargetTier
    outcome: TargetOutcome = TargetOutcome.FILES

    def __iter__(self) -> Iterator[str]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    @property
    def message(self) -> str | None:
        """Return the user-facing message for early-exit outcomes."""

        if self.outcome is TargetOutcome.NO_CHANGED_FILES:
            return NO_CHANGED_FILES_MESSAGE
        if self.outcome is TargetOutcome.NO_FILES:
            return f"No test files found with {','.join(self.patterns)}"
        return None


@dataclass(frozen=True, slots=True)
class TargetRequest:
    """File-selection inputs from the command line."""

    files: tuple[str, ...] = ()
    changed: bool = False


def setup_file_for(extension: str) -> str:
    """Return the project-relative setup file path for ``extension``."""

    return f"{TEST_DIR}/.setup.{extension}"


def default_pattern_for(extension: str) -> str:
    return f"{TEST_DIR}/**/*.test.{extension}"


def split_file_arguments(values: Iterable[str]) -> tuple[str, ...]:
    """Flatten file arguments, splitting comma-separated entries."""

    flattened: list[str] = []
    for value in values:
        flattened.extend(split_csv(value))
    return tuple(flattened)


class TargetFileResolver:
    """Resolve test files through the explicit, changed, env and default tiers."""

    def __init__(
        self,
        base_dir: Path,
        *,
        env_tests: Sequence[str] = (),
        changed_discovery: ChangedFilesDiscovery | None = None,
    ) -> None:
        """Bind the resolver to a project.

        Args:
            base_dir: Project root; patterns are relative to it.
            env_tests: Entries of the ``TESTS`` environment variable.
            changed_discovery: Git discovery used for ``--changed``.
        """

        self._base_dir = base_dir
        self._env_tests = tuple(env_tests)
        self._changed = changed_discovery or ChangedFilesDiscovery()

    def resolve(self, request: TargetRequest, extension: str) -> TargetFileSet:
        """Return the files to run.

        Only the first tier that yields patterns is expanded. ``--changed``
        with no matching files stops resolution instead of falling through.

        Args:
            request: File-selection inputs.
            extension: ``js`` or ``ts``.

        Returns:
            TargetFileSet: Files, or an early-exit outcome.
        """

        explicit = split_file_arguments(request.files)
        if explicit:
            tier, selected = TargetTier.EXPLICIT, list(explicit)
        elif request.changed:
            selected = self._changed.discover(self._base_dir, extension)
            LOGGER.debug("changed files: %s", selected)
            if not selected:
                return TargetFileSet(
                    files=(),
                    patterns=(),
                    tier=TargetTier.CHANGED,
                    outcome=TargetOutcome.NO_CHANGED_FILES,
                )
            tier = TargetTier.CHANGED
        elif self._env_tests:
            tier, selected = TargetTier.ENVIRONMENT, list(self._env_tests)
        else:
            tier, selected = TargetTier.DEFAULT, [default_pattern_for(extension)]

        patterns = (*selected, *STANDING_EXCLUDES)
        files = expand_patterns(patterns, self._base_dir)
        if not files:
            return TargetFileSet(files=(), patterns=patterns, tier=tier, outcome=TargetOutcome.NO_FILES)

        setup_file = setup_file_for(extension)
        if (self._base_dir / setup_file).is_file():
            files = [setup_file, *(entry for entry in files if entry != setup_file)]
        LOGGER.debug("tier=%s files=%d", tier, len(files))
        return TargetFileSet(files=tuple(files), patterns=patterns, tier=tier)


__all__ = [
    "NO_CHANGED_FILES_MESSAGE",
    "TargetFileResolver",
    "TargetFileSet",
    "TargetOutcome",
    "TargetRequest",
    "TargetTier",
    "default_pattern_for",
    "setup_file_for",
    "split_file_arguments",
]
