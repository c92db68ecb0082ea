# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Glob expansion with ``!``-prefixed exclusion patterns.

Patterns are evaluated relative to a project root. Positive patterns select
files; a literal directory selects every file beneath it; patterns prefixed
with ``!`` remove matching files or whole directories. Wildcards never match
hidden entries unless the pattern names them explicitly.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath

LOGGER = logging.getLogger(__name__)

NEGATION_PREFIX = "!"
_GLOB_CHARS = re.compile(r"[*?\[{]")
_BRACE = re.compile(r"\{([^{}]*)\}")


def has_magic(pattern: str) -> bool:
    """Return whether ``pattern`` contains glob syntax."""

    return bool(_GLOB_CHARS.search(pattern))


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives into separate patterns.

    Args:
        pattern: Glob pattern possibly containing brace groups.

    Returns:
        list[str]: Patterns without brace groups, in left-to-right order.
    """

    match = _BRACE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def split_patterns(patterns: Iterable[str]) -> tuple[list[str], list[str]]:
    """Partition ``patterns`` into positive and negated lists.

    Args:
        patterns: Raw patterns; negations start with ``!``.

    Returns:
        tuple[list[str], list[str]]: Positive patterns and negations with the
        ``!`` prefix removed.
    """

    positive: list[str] = []
    negative: list[str] = []
    for raw in patterns:
        pattern = raw.strip().replace("\\", "/")
        if not pattern:
            continue
        if pattern.startswith(NEGATION_PREFIX):
            stripped = pattern[len(NEGATION_PREFIX) :].rstrip("/")
            if stripped:
                negative.append(_strip_dot_prefix(stripped))
        else:
            positive.append(pattern)
    return positive, negative


def _strip_dot_prefix(pattern: str) -> str:
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern


def _to_relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _introduces_hidden(relative: str, pattern: str) -> bool:
    pattern_parts = PurePosixPath(pattern).parts
    for index, part in enumerate(PurePosixPath(relative).parts):
        if not part.startswith("."):
            continue
        named = index < len(pattern_parts) and pattern_parts[index].startswith(".")
        if not named:
            return True
    return False


def _walk_files(directory: Path) -> Iterator[Path]:
    for path in sorted(directory.rglob("*")):
        if path.is_file() and not any(part.startswith(".") for part in path.relative_to(directory).parts):
            yield path


def _expand_positive(pattern: str, root: Path) -> Iterator[str]:
    for alternative in expand_braces(pattern):
        candidate = Path(alternative)
        anchor = candidate if candidate.is_absolute() else root / candidate
        if not has_magic(alternative):
            if anchor.is_file():
                yield _to_relative(anchor, root)
            elif anchor.is_dir():
                for path in _walk_files(anchor):
                    yield _to_relative(path, root)
            continue
        if candidate.is_absolute():
            base, glob = Path(candidate.anchor), str(candidate.relative_to(candidate.anchor))
        else:
            base, glob = root, _strip_dot_prefix(alternative)
        for path in base.glob(glob):
            if not path.is_file():
                continue
            relative = _to_relative(path, root)
            if _introduces_hidden(_to_relative(path, base), glob):
                continue
            yield relative


def is_excluded(relative: str, negations: Sequence[str]) -> bool:
    """Return whether ``relative`` (or a parent directory) matches a negation.

    Args:
        relative: Project-relative posix path.
        negations: Negated patterns without the ``!`` prefix.

    Returns:
        bool: ``True`` when the path must be dropped.
    """

    parts = PurePosixPath(relative).parts
    prefixes = ["/".join(parts[: index + 1]) for index in range(len(parts))]
    for negation in negations:
        for alternative in expand_braces(negation):
            if any(fnmatchcase(prefix, alternative) for prefix in prefixes):
                return True
    return False


def expand_patterns(patterns: Iterable[str], root: Path) -> list[str]:
    """Expand ``patterns`` against the filesystem under ``root``.

    Args:
        patterns: Positive and ``!``-negated glob patterns.
        root: Directory patterns are relative to.

    Returns:
        list[str]: Unique, lexicographically sorted posix paths relative to
        ``root`` (absolute only when a match lies outside it).
    """

    positive, negative = split_patterns(patterns)
    matched: set[str] = set()
    for pattern in positive:
        for relative in _expand_positive(pattern, root):
            if not is_excluded(relative, negative):
                matched.add(relative)
    LOGGER.debug("expanded patterns=%s matches=%d", positive, len(matched))
    return sorted(matched)


__all__ = [
    "expand_braces",
    "expand_patterns",
    "has_magic",
    "is_excluded",
    "split_patterns",
]
