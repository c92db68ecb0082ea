# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Blocking wrappers around ``subprocess`` for short-lived helper commands.

Helper commands are the ones the resolvers need *before* the supervised child
starts: ``git`` queries, the typings generator and the framework config
reader. They run to completion, never register with the child registry and
never receive forwarded signals.
"""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; arguments are passed as a list and
# ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess

TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    capture_output: bool = False
    text: bool = True
    timeout: float | None = None
    discard_stdin: bool = False


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            command: Normalised command sequence that was executed.
            returncode: Exit status reported by the subprocess.
            stdout: Captured standard output stream.
            stderr: Captured standard error stream.
        """
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _ensure_text(value: str | bytes | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Argument list whose head is an absolute executable path.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedProcess: Subprocess execution metadata. Timeouts are reported
        with exit status ``124``.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        SubprocessExecutionError: When ``check`` is true and the process exits
            with a non-zero status.
    """

    normalized = normalize_args(args)
    resolved_options = options or CommandOptions()

    try:
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603 - argument list, no shell
            normalized,
            cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
            env=dict(resolved_options.env) if resolved_options.env is not None else None,
            check=False,
            capture_output=resolved_options.capture_output,
            text=resolved_options.text,
            timeout=resolved_options.timeout,
            stdin=subprocess.DEVNULL if resolved_options.discard_stdin else None,
        )
    except subprocess.TimeoutExpired as exc:
        stdout = _ensure_text(exc.stdout) or ""
        stderr = _ensure_text(exc.stderr)
        timeout_value = resolved_options.timeout
        timeout_msg = (
            f"Command timed out after {timeout_value:.1f}s" if timeout_value is not None else "Command timed out"
        )
        completed = subprocess.CompletedProcess(
            args=list(normalized),
            returncode=TIMEOUT_EXIT_CODE,
            stdout=stdout,
            stderr=f"{stderr}\n{timeout_msg}" if stderr else timeout_msg,
        )

    if resolved_options.check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


__all__ = [
    "CommandOptions",
    "SubprocessExecutionError",
    "normalize_args",
    "run_command",
]
