# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate Node.js modules on disk the way ``require.resolve`` does.

Only the subset needed to hand absolute module paths to the child process is
implemented: ``node_modules`` lookup walking up from each search path,
``package.json`` ``exports`` (string, subpath map and condition objects),
``main``, and the usual file extension and ``index`` probes.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

LOGGER = logging.getLogger(__name__)

FILE_EXTENSIONS: tuple[str, ...] = ("", ".js", ".cjs", ".mjs", ".json", ".node")
INDEX_FILES: tuple[str, ...] = ("index.js", "index.cjs", "index.mjs", "index.json")
EXPORT_CONDITIONS: tuple[str, ...] = ("require", "node", "default", "import")


class ModuleResolutionError(LookupError):
    """Raised when a Node module cannot be located from any search path."""

    def __init__(self, specifier: str, paths: Sequence[Path]) -> None:
        """Record the failing ``specifier`` and the directories searched.

        Args:
            specifier: Module specifier that failed to resolve.
            paths: Search paths consulted, in order.
        """

        searched = ", ".join(str(path) for path in paths) or "<none>"
        super().__init__(f"Cannot find module '{specifier}' (searched: {searched})")
        self.specifier = specifier
        self.paths = tuple(paths)


def split_specifier(specifier: str) -> tuple[str, str]:
    """Split a bare specifier into package name and subpath.

    Args:
        specifier: Specifier such as ``ts-node/register`` or ``@scope/pkg/sub``.

    Returns:
        tuple[str, str]: Package name and subpath (empty when absent).
    """

    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) >= 2:
        return "/".join(parts[:2]), "/".join(parts[2:])
    return parts[0], "/".join(parts[1:])


def _node_modules_dirs(start: Path) -> Iterator[Path]:
    for directory in (start, *start.parents):
        if directory.name == "node_modules":
            continue
        yield directory / "node_modules"


def _probe_file(candidate: Path) -> Path | None:
    for extension in FILE_EXTENSIONS:
        probe = candidate.with_name(candidate.name + extension) if extension else candidate
        if probe.is_file():
            return probe
    if candidate.is_dir():
        return _probe_directory(candidate)
    return None


def _probe_directory(directory: Path) -> Path | None:
    manifest = _read_package_json(directory)
    main = manifest.get("main") if manifest else None
    if isinstance(main, str) and main:
        resolved = _probe_file(directory / main)
        if resolved is not None:
            return resolved
    for index in INDEX_FILES:
        candidate = directory / index
        if candidate.is_file():
            return candidate
    return None


def _read_package_json(directory: Path) -> dict[str, object]:
    try:
        payload = json.loads((directory / "package.json").read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _pick_condition(target: object) -> str | None:
    if isinstance(target, str):
        return target
    if isinstance(target, dict):
        for condition in EXPORT_CONDITIONS:
            if condition in target:
                picked = _pick_condition(target[condition])
                if picked is not None:
                    return picked
    if isinstance(target, list):
        for entry in target:
            picked = _pick_condition(entry)
            if picked is not None:
                return picked
    return None


def _resolve_export(package_dir: Path, exports: object, subpath: str) -> Path | None:
    key = f"./{subpath}" if subpath else "."
    if isinstance(exports, dict) and any(str(name).startswith(".") for name in exports):
        target = exports.get(key)
        if target is None:
            target = _match_export_pattern(exports, key)
    elif key == ".":
        target = exports
    else:
        return None
    picked = _pick_condition(target)
    if picked is None:
        return None
    candidate = (package_dir / picked).resolve()
    return candidate if candidate.is_file() else None


def _match_export_pattern(exports: dict[str, object], key: str) -> object | None:
    for pattern, target in exports.items():
        if "*" not in pattern:
            continue
        prefix, _, suffix = pattern.partition("*")
        if key.startswith(prefix) and key.endswith(suffix) and len(key) >= len(prefix) + len(suffix):
            stem = key[len(prefix) : len(key) - len(suffix)]
            picked = _pick_condition(target)
            return picked.replace("*", stem) if picked is not None else None
    return None


def _resolve_in_package(package_dir: Path, subpath: str) -> Path | None:
    manifest = _read_package_json(package_dir)
    exports = manifest.get("exports")
    if exports is not None:
        resolved = _resolve_export(package_dir, exports, subpath)
        if resolved is not None:
            return resolved
    if subpath:
        return _probe_file(package_dir / subpath)
    return _probe_directory(package_dir)


def import_resolve(specifier: str, *, paths: Iterable[Path]) -> Path:
    """Resolve ``specifier`` to an absolute file, searching ``paths`` in order.

    Args:
        specifier: Bare module specifier, relative path or absolute path.
        paths: Directories to resolve from; each one walks up to the
            filesystem root looking for ``node_modules``.

    Returns:
        Path: Absolute path of the resolved module file.

    Raises:
        ModuleResolutionError: If no search path yields the module.
    """

    search_paths = [Path(path) for path in paths]
    as_path = Path(specifier)
    if as_path.is_absolute() or specifier.startswith(("./", "../")):
        bases = [Path()] if as_path.is_absolute() else search_paths
        for base in bases:
            resolved = _probe_file((base / as_path).resolve())
            if resolved is not None:
                return resolved.resolve()
        raise ModuleResolutionError(specifier, search_paths)

    package_name, subpath = split_specifier(specifier)
    for search_path in search_paths:
        for node_modules in _node_modules_dirs(search_path.resolve()):
            package_dir = node_modules / package_name
            if not package_dir.is_dir():
                continue
            resolved = _resolve_in_package(package_dir, subpath)
            if resolved is not None:
                LOGGER.debug("resolved module=%s path=%s", specifier, resolved)
                return resolved.resolve()
    raise ModuleResolutionError(specifier, search_paths)


def resolve_package_dir(name: str, *, paths: Iterable[Path]) -> Path | None:
    """Return the installed directory for package ``name`` or ``None``.

    Args:
        name: Package name (scoped names supported).
        paths: Directories to search from.

    Returns:
        Path | None: Package directory when found.
    """

    for search_path in paths:
        for node_modules in _node_modules_dirs(Path(search_path).resolve()):
            candidate = node_modules / name
            if (candidate / "package.json").is_file():
                return candidate.resolve()
    return None


def try_import_resolve(specifier: str, *, paths: Iterable[Path]) -> Path | None:
    """Return :func:`import_resolve` output, or ``None`` when it fails.

    Args:
        specifier: Module specifier to resolve.
        paths: Search paths forwarded to :func:`import_resolve`.

    Returns:
        Path | None: Resolved module path when available.
    """

    try:
        return import_resolve(specifier, paths=paths)
    except ModuleResolutionError as exc:
        LOGGER.debug("optional module unavailable: %s", exc)
        return None


__all__ = [
    "ModuleResolutionError",
    "import_resolve",
    "resolve_package_dir",
    "split_specifier",
    "try_import_resolve",
]
