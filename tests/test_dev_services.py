# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the development cluster launch assembly."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from eggrunner.cli.commands.dev.models import DevCLIOptions, build_dev_options
from eggrunner.cli.commands.dev.services import build_dev_launch, format_import_flag
from eggrunner.cli.options import build_common_options
from eggrunner.cli.shared import CLIError
from eggrunner.constants import START_CLUSTER_SCRIPT
from eggrunner.context import InvocationContext
from eggrunner.runtime.resolver import RuntimeEnvironmentResolver, RuntimeRequest


def _options(base: Path, **overrides: object) -> DevCLIOptions:
    common = build_common_options(
        base=base,
        require=overrides.pop("require", None),  # type: ignore[arg-type]
        dry_run=False,
        typescript=None,
        ts=None,
        tscompiler=None,
        declarations=None,
        inspect=False,
        inspect_brk=False,
        debug=False,
        emoji=False,
    )
    values: dict[str, object] = {"port": None, "workers": 1, "framework": None, "sticky": False}
    values.update(overrides)
    return build_dev_options(common, **values)  # type: ignore[arg-type]


def _launch(base: Path, options: DevCLIOptions, env: dict[str, str] | None = None, **kwargs: object):
    inherited = {"EGGRUNNER_NODE_HOME": os.environ["EGGRUNNER_NODE_HOME"], **(env or {})}
    context = InvocationContext.create(base, options, env=inherited)
    resolution = RuntimeEnvironmentResolver(context, environ={}).resolve(RuntimeRequest())
    kwargs.setdefault("warn", lambda message: None)
    kwargs.setdefault("read_port", lambda *args, **kw: None)
    kwargs.setdefault("detect", lambda port: port)
    return build_dev_launch(context, resolution, **kwargs)  # type: ignore[arg-type]


def test_format_import_flag(tmp_path: Path) -> None:
    hook = tmp_path / "hook.mjs"

    assert format_import_flag("./hook.js", is_esm=False) == "--require=./hook.js"
    assert format_import_flag("tsx/esm", is_esm=True) == "--import=tsx/esm"
    assert format_import_flag(str(hook), is_esm=True) == f"--import={hook.as_uri()}"


def test_start_options_payload(project) -> None:
    framework = project.module("egg")

    launch = _launch(project.root, _options(project.root, workers=2, sticky=True))

    assert launch.script == START_CLUSTER_SCRIPT
    assert json.loads(launch.argv[0]) == {
        "baseDir": str(project.root.resolve()),
        "workers": 2,
        "port": 7001,
        "framework": str(framework),
        "typescript": False,
        "tscompiler": None,
        "sticky": True,
    }
    assert launch.environment.env["NODE_ENV"] == "development"
    assert launch.environment.env["EGG_MASTER_CLOSE_TIMEOUT"] == "1000"


def test_inherited_node_env_is_kept(project) -> None:
    project.module("egg")

    launch = _launch(project.root, _options(project.root), env={"NODE_ENV": "unittest"})

    assert launch.environment.env["NODE_ENV"] == "unittest"


def test_requires_become_exec_argv(project) -> None:
    project.module("egg")
    project.manifest(egg={"require": "./preload.js"})

    launch = _launch(project.root, _options(project.root, require=["./flag.js"]))

    assert launch.environment.exec_argv == ["--require=./flag.js", "--require=./preload.js"]


def test_esm_requires_use_import(project) -> None:
    project.module("egg")
    project.manifest(type="module", egg={"require": ["tsx/esm"]})

    launch = _launch(project.root, _options(project.root))

    assert launch.environment.exec_argv == ["--import=tsx/esm"]


def test_explicit_port_skips_configuration(project) -> None:
    project.module("egg")

    def read_port(*args: object, **kwargs: object) -> int | None:
        raise AssertionError("configuration must not be read")

    launch = _launch(project.root, _options(project.root, port=8080), read_port=read_port)

    assert launch.start_options["port"] == 8080


def test_configured_port_is_used(project) -> None:
    framework = project.module("egg")
    seen: list[object] = []

    def read_port(base_dir: Path, framework_dir: Path, **kwargs: object) -> int | None:
        seen.append((base_dir, framework_dir))
        return 7777

    launch = _launch(project.root, _options(project.root), read_port=read_port)

    assert launch.start_options["port"] == 7777
    assert seen == [(project.root.resolve(), framework)]


def test_busy_default_port_warns(project) -> None:
    project.module("egg")
    warnings: list[str] = []

    launch = _launch(
        project.root,
        _options(project.root),
        env={"EGG_BIN_DEFAULT_PORT": "7100"},
        warn=warnings.append,
        detect=lambda port: port + 1,
    )

    assert launch.start_options["port"] == 7101
    assert warnings == ["server port 7100 is unavailable, now using port 7101"]


def test_absolute_framework_path(project, tmp_path: Path) -> None:
    launch = _launch(project.root, _options(project.root, framework=str(tmp_path / "fw")))

    assert launch.start_options["framework"] == str(tmp_path / "fw")


def test_missing_framework_is_a_cli_error(project) -> None:
    with pytest.raises(CLIError) as excinfo:
        _launch(project.root, _options(project.root, framework="yadan"))

    assert excinfo.value.exit_code == 1
    assert "yadan" in str(excinfo.value)
