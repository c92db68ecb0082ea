# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git-based discovery of changed test files."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

from ..constants import TEST_DIR
from ..process import CommandOptions, run_command

GitRunner = Callable[[Sequence[str], Path], list[str]]


class ChangedFilesDiscovery:
    """Collect test files that Git reports as modified or untracked."""

    def __init__(self, *, runner: GitRunner | None = None) -> None:
        """Create a changed-files discovery.

        Args:
            runner: Optional command runner used to execute git commands. A
                default based on :func:`run_command` is used when omitted.
        """

        self._runner = runner or self._default_runner

    def discover(self, root: Path, extension: str, *, directory: str = TEST_DIR) -> list[str]:
        """Return changed ``*.test.<extension>`` files under ``directory``.

        Args:
            root: Project root; git runs from here.
            extension: Test file extension without the dot.
            directory: Project-relative directory to restrict the query to.

        Returns:
            list[str]: Sorted, project-relative posix paths of files that
            still exist on disk.
        """

        suffix = f".test.{extension}"
        candidates: set[str] = set()
        for relative in (*self._diff_names(root, directory), *self._untracked(root, directory)):
            if not relative.endswith(suffix):
                continue
            if (root / relative).is_file():
                candidates.add(Path(relative).as_posix())
        return sorted(candidates)

    def __call__(self, root: Path, extension: str) -> list[str]:
        return self.discover(root, extension)

    def _diff_names(self, root: Path, directory: str) -> Iterator[str]:
        cmd = ["git", "diff", "--name-only", "HEAD", "--relative", "--", directory]
        yield from self._lines(cmd, root)

    def _untracked(self, root: Path, directory: str) -> Iterator[str]:
        cmd = ["git", "ls-files", "--others", "--exclude-standard", "--", directory]
        yield from self._lines(cmd, root)

    def _lines(self, cmd: Sequence[str], root: Path) -> Iterator[str]:
        for raw in self._runner(cmd, root):
            stripped = raw.strip()
            if stripped:
                yield stripped

    @staticmethod
    def _default_runner(cmd: Sequence[str], root: Path) -> list[str]:
        """Execute ``cmd`` returning stdout lines while swallowing failures.

        Args:
            cmd: Git command to execute.
            root: Directory to run git from.

        Returns:
            list[str]: Raw stdout lines produced by subprocess execution.
        """

        try:
            cp = run_command(cmd, options=CommandOptions(cwd=root, capture_output=True, text=True, check=False))
        except FileNotFoundError:
            return []
        if cp.returncode != 0:
            return []
        return (cp.stdout or "").splitlines()


__all__ = ["ChangedFilesDiscovery", "GitRunner"]
