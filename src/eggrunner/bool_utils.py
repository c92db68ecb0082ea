# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Boolean parsing helpers shared across modules."""

from __future__ import annotations

from typing import Final

TRUE_LITERAL: Final[str] = "true"
FALSE_LITERAL: Final[str] = "false"


def parse_strict_bool(value: str | None) -> bool | None:
    """Return the boolean spelled by ``value`` when it is exactly ``true``/``false``.

    Any other string, including ``"1"`` or ``"TRUE"``, is treated as unset so
    that toggles only react to the two documented spellings.

    Args:
        value: Raw string pulled from the environment or a legacy flag.

    Returns:
        bool | None: Parsed boolean, or ``None`` when ``value`` is not recognised.
    """

    if value == TRUE_LITERAL:
        return True
    if value == FALSE_LITERAL:
        return False
    return None


def coerce_optional_bool(value: object) -> bool | None:
    """Return ``value`` when it is a real boolean, otherwise ``None``.

    Args:
        value: Arbitrary JSON value read from a manifest.

    Returns:
        bool | None: ``value`` itself for booleans, ``None`` for anything else.
    """

    return value if isinstance(value, bool) else None


__all__ = ["coerce_optional_bool", "parse_strict_bool"]
