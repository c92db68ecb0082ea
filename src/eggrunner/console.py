# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich console management utilities."""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import Literal

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal.

    Returns:
        bool: ``True`` when ``sys.stdout`` reports TTY support, ``False`` otherwise.
    """

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Provision Rich :class:`Console` instances keyed by colour and emoji settings."""

    def __init__(self) -> None:
        """Initialise the manager with an in-memory cache keyed by presentation flags."""

        self._cache: dict[tuple[bool, bool, bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool, stderr: bool = False) -> Console:
        """Return a Rich console configured for ``color`` and ``emoji`` preferences.

        Args:
            color: ``True`` when ANSI colour output should be enabled.
            emoji: ``True`` when Rich should render emoji glyphs.
            stderr: ``True`` when the console should write to standard error.

        Returns:
            Console: Cached or newly constructed console matching the preferences.
        """

        tty = detect_tty()
        key = (color, emoji, tty, stderr)
        if key not in self._cache:
            color_system: Literal["auto", "standard", "256", "truecolor", "windows"] | None = (
                "auto" if color and tty else None
            )
            self._cache[key] = Console(
                color_system=color_system,
                force_terminal=tty,
                no_color=not (color and tty),
                emoji=emoji,
                soft_wrap=True,
                stderr=stderr,
                highlight=False,
            )
        return self._cache[key]


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return a cached :class:`RichConsoleManager` instance.

    Returns:
        RichConsoleManager: Singleton console manager bound to the process.
    """

    return RichConsoleManager()


__all__ = [
    "RichConsoleManager",
    "detect_tty",
    "get_console_manager",
]
