# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the c8 coverage wrapper arguments."""

from __future__ import annotations

from pathlib import Path

from eggrunner.constants import DEFAULT_C8_ARGS, DEFAULT_COVERAGE_EXCLUDES
from eggrunner.coverage import build_coverage_plan, clean_coverage_output, merge_excludes


def _excludes(args: tuple[str, ...]) -> list[str]:
    return [args[index + 1] for index, arg in enumerate(args) if arg == "-x"]


def test_merge_excludes_keeps_first_seen_order() -> None:
    assert merge_excludes(["a", " b "], ["b", "c"], ["", "a", "d"]) == ["a", "b", "c", "d"]


def test_default_plan(tmp_path: Path) -> None:
    plan = build_coverage_plan(tmp_path, c8_args=DEFAULT_C8_ARGS, typescript=False)

    assert plan.args[:3] == ("--temp-directory", "node_modules/.c8_output", "-r")
    assert "--extension" not in plan.args
    assert _excludes(plan.args) == list(DEFAULT_COVERAGE_EXCLUDES)
    assert plan.env == ()


def test_typescript_plan(tmp_path: Path) -> None:
    plan = build_coverage_plan(tmp_path, c8_args="-r text", typescript=True)

    assert plan.args[:4] == ("-r", "text", "--extension", ".ts")
    assert plan.env == (("SPAWN_WRAP_SHIM_ROOT", str(tmp_path / "node_modules")),)


def test_exclude_sources_are_unioned(tmp_path: Path) -> None:
    plan = build_coverage_plan(
        tmp_path,
        c8_args="",
        typescript=False,
        env_excludes=["scripts/**", "docs/"],
        flag_excludes=["app/generated/**", "scripts/**"],
    )

    excludes = _excludes(plan.args)
    assert excludes[0] == "scripts/**"
    assert excludes[1] == "docs/"
    assert excludes[-1] == "app/generated/**"
    assert excludes.count("scripts/**") == 1
    assert excludes.count("docs/") == 1


def test_c8_args_are_split_shell_style(tmp_path: Path) -> None:
    plan = build_coverage_plan(tmp_path, c8_args="--reporter 'text summary'", typescript=False)

    assert plan.args[:2] == ("--reporter", "text summary")


def test_clean_coverage_output(tmp_path: Path) -> None:
    (tmp_path / "node_modules" / ".c8_output").mkdir(parents=True)
    (tmp_path / "node_modules" / ".c8_output" / "cov.json").write_text("{}", encoding="utf-8")
    (tmp_path / "coverage").mkdir()
    (tmp_path / "node_modules" / "keep").mkdir()

    clean_coverage_output(tmp_path)

    assert not (tmp_path / "node_modules" / ".c8_output").exists()
    assert not (tmp_path / "coverage").exists()
    assert (tmp_path / "node_modules" / "keep").is_dir()
    clean_coverage_output(tmp_path)
