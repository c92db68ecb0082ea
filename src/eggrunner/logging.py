# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import logging

from rich.logging import RichHandler
from rich.text import Text

from .console import detect_tty, get_console_manager

PACKAGE_LOGGER_NAME = "eggrunner"


def emoji(symbol: str, enable: bool) -> str:
    """Select an emoji symbol based on the caller's preference.

    Args:
        symbol: Emoji text to include in the output.
        enable: Flag indicating whether emoji output is desired.

    Returns:
        str: Emoji symbol when enabled, otherwise an empty string.
    """

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
    stderr: bool = False,
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
        stderr: ``True`` when the message belongs on standard error.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji, stderr=stderr)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message on standard error.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    prefix = emoji("⚠️ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color, stderr=True)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message on standard error.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    prefix = emoji("❌ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="red", use_emoji=use_emoji, use_color=use_color, stderr=True)


def configure_debug_logging(enabled: bool) -> None:
    """Route package debug records through a Rich handler when ``enabled``.

    Args:
        enabled: ``True`` to emit ``DEBUG`` records from the ``eggrunner`` loggers.
    """

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not enabled:
        logger.setLevel(logging.WARNING)
        return
    if not getattr(logger, "_eggrunner_debug_configured", False):
        console = get_console_manager().get(color=detect_tty(), emoji=False, stderr=True)
        handler = RichHandler(console=console, show_time=False, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        setattr(logger, "_eggrunner_debug_configured", True)
    logger.setLevel(logging.DEBUG)


__all__ = [
    "configure_debug_logging",
    "emoji",
    "fail",
    "warn",
]
