# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

import pytest

from eggrunner import constants

_INHERITED_ENV = (
    constants.TEST_TIMEOUT_ENV,
    constants.TEST_REPORTER_ENV,
    constants.TESTS_ENV,
    constants.COV_EXCLUDES_ENV,
    constants.DEFAULT_PORT_ENV,
    constants.TS_COMPILER_ENV,
    constants.TYPESCRIPT_ENV,
    constants.JB_DEBUG_FILE_ENV,
    constants.MOCHA_FILE_ENV,
    constants.DEBUG_ENV,
    constants.TS_NODE_FILES_ENV,
    constants.NODE_OPTIONS_ENV,
    constants.NODE_ENV_ENV,
)


class ProjectBuilder:
    """Write a throwaway egg project tree for a single test."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def file(self, relative: str, content: str = "") -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def json(self, relative: str, payload: Mapping[str, object]) -> Path:
        return self.file(relative, json.dumps(payload))

    def manifest(self, **payload: object) -> Path:
        return self.json("package.json", {"name": "app", **payload})

    def module(
        self,
        name: str,
        files: Mapping[str, str] | None = None,
        **manifest: object,
    ) -> Path:
        """Install a fake package under ``node_modules`` and return its directory."""

        package_dir = f"node_modules/{name}"
        self.json(f"{package_dir}/package.json", {"name": name, **manifest})
        for relative, content in (files or {"index.js": ""}).items():
            self.file(f"{package_dir}/{relative}", content)
        return (self.root / package_dir).resolve()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Drop runner variables inherited from the developer shell.

    Returns:
        Path: Isolated tool home used for bundled-module lookups.
    """

    for name in _INHERITED_ENV:
        monkeypatch.delenv(name, raising=False)
    home = tmp_path / "tool-home"
    home.mkdir()
    monkeypatch.setenv(constants.NODE_HOME_ENV, str(home))
    return home


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Return an application directory holding a minimal manifest."""

    builder = ProjectBuilder(tmp_path / "app")
    builder.manifest()
    return builder


@pytest.fixture
def tool_home(clean_env: Path) -> ProjectBuilder:
    return ProjectBuilder(clean_env)
