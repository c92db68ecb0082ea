# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

import re
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.text import Text

from ..logging import fail as core_fail
from ..logging import warn as core_warn


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences.

        Args:
            message: Text describing the failure state.
        """

        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences.

        Args:
            message: Text describing the warning condition.
        """

        core_warn(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper.

        Args:
            message: Text written to standard output.
        """

        typer.echo(message)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        Args:
            message: Debug payload rendered with simple highlighting.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            key, raw_value = match.group(1), match.group(2)
            text.append(key, style="bold magenta")
            text.append("=", style="dim")
            text.append(raw_value, style="bold blue" if key in {"command", "cmd"} else "bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger instance bound to a dedicated Rich console.
    """

    console = Console(no_color=no_color, highlight=False, stderr=True)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


__all__ = ["CLIError", "CLILogger", "build_cli_logger"]
