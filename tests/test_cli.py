# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end CLI tests driven through Typer's runner in dry-run mode."""

from __future__ import annotations

import json
import shlex
from pathlib import Path

import pytest
from typer.testing import CliRunner

from eggrunner.cli.app import app
from eggrunner.cli.typer_ext import _primary_option_name

MOCHA = "/opt/mocha/bin/_mocha"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def suite(project, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MOCHA_FILE", MOCHA)
    project.file("test/a.test.js")
    project.file("test/b/b.test.js")
    return project


def _dry_run_command(output: str) -> list[str]:
    [line] = [line for line in output.splitlines() if line.startswith("dry run: $ ")]
    return shlex.split(line.removeprefix("dry run: $ "))


def test_help_lists_commands(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for name in ("test", "cov", "dev"):
        assert name in result.stdout


def test_test_dry_run(runner: CliRunner, suite) -> None:
    result = runner.invoke(app, ["test", "--base", str(suite.root), "--dry-run", "--no-mochawesome"])

    assert result.exit_code == 0, result.output
    assert _dry_run_command(result.stdout) == [
        "node",
        "--unhandled-rejections=strict",
        MOCHA,
        "--dry-run",
        "--exit",
        "--timeout=60000",
        "test/a.test.js",
        "test/b/b.test.js",
    ]


def test_test_flags_reach_mocha(runner: CliRunner, suite) -> None:
    result = runner.invoke(
        app,
        [
            "test",
            "test/b",
            "--base",
            str(suite.root),
            "-d",
            "--no-mochawesome",
            "--grep",
            "foo,bar",
            "--bail",
            "--timeout",
            "2000",
            "--parallel",
            "--jobs",
            "2",
        ],
    )

    assert result.exit_code == 0, result.output
    assert _dry_run_command(result.stdout)[3:] == [
        "--dry-run",
        "--exit",
        "--bail",
        "--grep=foo",
        "--grep=bar",
        "--timeout=2000",
        "--parallel",
        "--jobs=2",
        "test/b/b.test.js",
    ]


def test_inspect_disables_timeout(runner: CliRunner, suite) -> None:
    result = runner.invoke(app, ["test", "--base", str(suite.root), "-d", "--no-mochawesome", "--inspect"])

    assert result.exit_code == 0, result.output
    assert "--no-timeout" in _dry_run_command(result.stdout)


def test_tests_environment_selects_files(runner: CliRunner, suite) -> None:
    result = runner.invoke(
        app,
        ["test", "--base", str(suite.root), "-d", "--no-mochawesome"],
        env={"TESTS": "test/b/**/*.test.js"},
    )

    assert result.exit_code == 0, result.output
    assert _dry_run_command(result.stdout)[-1] == "test/b/b.test.js"
    assert "test/a.test.js" not in result.stdout


def test_missing_base_dir_exits_66(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["test", "--base", str(tmp_path / "missing"), "--no-emoji"])

    assert result.exit_code == 66


def test_no_test_files_exits_cleanly(runner: CliRunner, project, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MOCHA_FILE", MOCHA)

    result = runner.invoke(app, ["test", "--base", str(project.root)])

    assert result.exit_code == 0
    assert "No test files found with test/**/*.test.js,!test/fixtures,!test/node_modules" in result.stdout


def test_changed_without_changes_exits_cleanly(runner: CliRunner, project) -> None:
    result = runner.invoke(app, ["test", "--base", str(project.root), "--changed"])

    assert result.exit_code == 0
    assert "No changed test files" in result.stdout


def test_missing_mocha_is_a_resolution_error(runner: CliRunner, project) -> None:
    project.file("test/a.test.js")

    result = runner.invoke(app, ["test", "--base", str(project.root), "--no-mochawesome", "--no-emoji"])

    assert result.exit_code == 1
    assert "dry run" not in result.stdout


def test_missing_compiler_is_a_resolution_error(runner: CliRunner, suite) -> None:
    result = runner.invoke(app, ["test", "--base", str(suite.root), "--typescript", "-d", "--no-emoji"])

    assert result.exit_code == 1


def test_cov_dry_run(runner: CliRunner, suite) -> None:
    c8 = suite.module("c8", {"bin/c8.js": ""}) / "bin" / "c8.js"
    (suite.root / "coverage").mkdir()

    result = runner.invoke(
        app,
        ["cov", "--base", str(suite.root), "-d", "--no-mochawesome", "-x", "app/generated/**", "--c8=-r text"],
    )

    assert result.exit_code == 0, result.output
    command = _dry_run_command(result.stdout)
    assert command[:4] == ["node", str(c8), "-r", "text"]
    assert command[command.index("app/generated/**") - 1] == "-x"
    inner = command[command.index(MOCHA) - 2 :]
    assert inner[:3] == ["node", "--unhandled-rejections=strict", MOCHA]
    assert inner[-2:] == ["test/a.test.js", "test/b/b.test.js"]
    assert (suite.root / "coverage").is_dir()


def test_dev_dry_run(runner: CliRunner, project, tmp_path: Path) -> None:
    framework = tmp_path / "framework"

    result = runner.invoke(
        app,
        ["dev", "--base", str(project.root), "-d", "--port", "7002", "--framework", str(framework), "-c", "2"],
    )

    assert result.exit_code == 0, result.output
    command = _dry_run_command(result.stdout)
    assert command[0] == "node"
    assert command[1].endswith("start_cluster.cjs")
    payload = json.loads(command[2])
    assert payload["port"] == 7002
    assert payload["workers"] == 2
    assert payload["framework"] == str(framework)
    assert payload["baseDir"] == str(project.root.resolve())


def test_primary_option_name_prefers_long_flags() -> None:
    class Param:
        opts = ["-b", "--bail"]
        secondary_opts: list[str] = []
        name = "bail"

    assert _primary_option_name(Param()) == "bail"  # type: ignore[arg-type]
