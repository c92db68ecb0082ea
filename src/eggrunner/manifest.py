# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only access to the project manifest (``package.json``)."""

from __future__ import annotations

import json
import logging
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .bool_utils import coerce_optional_bool
from .constants import MANIFEST_FILE, TSCONFIG_FILE

LOGGER = logging.getLogger(__name__)


class ProjectKind(StrEnum):
    """Kinds of egg projects distinguished by the manifest."""

    APPLICATION = "application"
    FRAMEWORK = "framework"
    PLUGIN = "plugin"


class EggSettings(BaseModel):
    """The ``egg`` configuration block of ``package.json``.

    Values are kept loosely typed; consumers only honour the shapes they
    recognise (a ``typescript`` string, for example, is ignored rather than
    rejected).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    typescript: Any = None
    declarations: Any = None
    require: Any = None
    revert: Any = None
    framework: Any = None
    is_framework: Any = Field(default=None, alias="isFramework")

    @property
    def typescript_flag(self) -> bool | None:
        return coerce_optional_bool(self.typescript)

    @property
    def declarations_flag(self) -> bool | None:
        return coerce_optional_bool(self.declarations)

    @property
    def requires(self) -> list[str]:
        """Return ``require`` normalised to a list (string or list accepted)."""

        return _string_list(self.require)

    @property
    def reverts(self) -> list[str]:
        """Return ``revert`` normalised to a list (string or list accepted)."""

        return _string_list(self.revert)


class PackageManifest(BaseModel):
    """Subset of ``package.json`` consulted by the resolvers."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str | None = None
    type: str | None = None
    dependencies: dict[str, Any] = Field(default_factory=dict)
    dev_dependencies: dict[str, Any] = Field(default_factory=dict, alias="devDependencies")
    egg: EggSettings = Field(default_factory=EggSettings)
    egg_plugin: Any = Field(default=None, alias="eggPlugin")
    egg_module: Any = Field(default=None, alias="eggModule")

    @property
    def is_esm(self) -> bool:
        """Return ``True`` when the project declares the ``module`` system."""

        return self.type == "module"

    def declares_dependency(self, name: str) -> bool:
        """Return whether ``name`` is a runtime or development dependency.

        Args:
            name: Package name to look up.

        Returns:
            bool: ``True`` when either dependency table lists ``name``.
        """

        return bool(self.dependencies.get(name)) or bool(self.dev_dependencies.get(name))


def _string_list(value: object) -> list[str]:
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, list):
        return [entry for entry in value if isinstance(entry, str) and entry]
    return []


def read_manifest(base_dir: Path) -> PackageManifest:
    """Return the parsed manifest under ``base_dir``.

    A missing, unreadable or malformed manifest yields an empty model so that
    plain directories can still be driven.

    Args:
        base_dir: Project root directory.

    Returns:
        PackageManifest: Parsed manifest or an empty default.
    """

    manifest_path = base_dir / MANIFEST_FILE
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        LOGGER.debug("manifest unavailable path=%s error=%s", manifest_path, exc)
        return PackageManifest()
    if not isinstance(payload, dict):
        return PackageManifest()
    if not isinstance(payload.get("egg"), dict):
        payload.pop("egg", None)
    try:
        return PackageManifest.model_validate(payload)
    except ValidationError as exc:
        LOGGER.debug("manifest ignored path=%s error=%s", manifest_path, exc)
        return PackageManifest()


def has_tsconfig(base_dir: Path) -> bool:
    """Return whether ``tsconfig.json`` exists at the project root."""

    return (base_dir / TSCONFIG_FILE).is_file()


def detect_project_kind(manifest: PackageManifest) -> ProjectKind:
    """Classify the project as an application, framework or plugin.

    Args:
        manifest: Parsed project manifest.

    Returns:
        ProjectKind: ``PLUGIN`` when ``eggPlugin`` or ``eggModule`` is declared, ``FRAMEWORK``
        when the egg block marks a framework, ``APPLICATION`` otherwise.
    """

    if manifest.egg_plugin or manifest.egg_module:
        return ProjectKind.PLUGIN
    if manifest.egg.is_framework is True:
        return ProjectKind.FRAMEWORK
    return ProjectKind.APPLICATION


__all__ = [
    "EggSettings",
    "PackageManifest",
    "ProjectKind",
    "detect_project_kind",
    "has_tsconfig",
    "read_manifest",
]
