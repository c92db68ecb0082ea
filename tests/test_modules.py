# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for Node module resolution."""

from __future__ import annotations

import pytest

from eggrunner.modules import (
    ModuleResolutionError,
    import_resolve,
    resolve_package_dir,
    split_specifier,
    try_import_resolve,
)


def test_split_specifier_handles_scopes() -> None:
    assert split_specifier("ts-node/register") == ("ts-node", "register")
    assert split_specifier("@eggjs/mock/register") == ("@eggjs/mock", "register")
    assert split_specifier("@eggjs/utils") == ("@eggjs/utils", "")
    assert split_specifier("mocha") == ("mocha", "")


def test_resolves_main_and_subpath_files(project) -> None:
    package_dir = project.module("ts-node", {"dist/index.js": "", "register.js": ""}, main="dist/index.js")

    assert import_resolve("ts-node", paths=[project.root]) == package_dir / "dist" / "index.js"
    assert import_resolve("ts-node/register", paths=[project.root]) == package_dir / "register.js"


def test_resolves_directory_index(project) -> None:
    package_dir = project.module("ts-node", {"register/index.js": ""})

    assert import_resolve("ts-node/register", paths=[project.root]) == package_dir / "register" / "index.js"


def test_resolves_conditional_exports(project) -> None:
    package_dir = project.module(
        "@eggjs/mock",
        {"dist/commonjs/register.js": "", "dist/esm/register.js": ""},
        exports={
            "./register": {
                "import": "./dist/esm/register.js",
                "require": "./dist/commonjs/register.js",
            },
        },
    )

    resolved = import_resolve("@eggjs/mock/register", paths=[project.root])

    assert resolved == package_dir / "dist" / "commonjs" / "register.js"


def test_resolves_wildcard_exports(project) -> None:
    package_dir = project.module("tool", {"lib/a.js": ""}, exports={"./*": "./lib/*.js"})

    assert import_resolve("tool/a", paths=[project.root]) == package_dir / "lib" / "a.js"


def test_walks_up_to_parent_node_modules(project) -> None:
    package_dir = project.module("mocha", {"bin/_mocha": ""})
    nested = project.root / "packages" / "inner"
    nested.mkdir(parents=True)

    assert import_resolve("mocha/bin/_mocha", paths=[nested]) == package_dir / "bin" / "_mocha"


def test_search_paths_are_consulted_in_order(project, tool_home) -> None:
    home_copy = tool_home.module("ts-node", {"register.js": ""})
    project.module("ts-node", {"register.js": ""})

    assert import_resolve("ts-node/register", paths=[tool_home.root, project.root]) == home_copy / "register.js"


def test_relative_and_absolute_specifiers(project) -> None:
    hook = project.file("hooks/setup.js")

    assert import_resolve("./hooks/setup", paths=[project.root]) == hook.resolve()
    assert import_resolve(str(hook), paths=[]) == hook.resolve()


def test_missing_module_raises(project) -> None:
    with pytest.raises(ModuleResolutionError) as excinfo:
        import_resolve("ts-node/register", paths=[project.root])

    assert excinfo.value.specifier == "ts-node/register"
    assert "Cannot find module 'ts-node/register'" in str(excinfo.value)
    assert try_import_resolve("ts-node/register", paths=[project.root]) is None


def test_resolve_package_dir(project) -> None:
    package_dir = project.module("egg")

    assert resolve_package_dir("egg", paths=[project.root]) == package_dir
    assert resolve_package_dir("yadan", paths=[project.root]) is None
