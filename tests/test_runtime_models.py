# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the runtime environment overlay."""

from __future__ import annotations

from eggrunner.runtime.models import RuntimeEnvironment, quote_node_option_path


def test_flags_are_append_only_and_unique() -> None:
    environment = RuntimeEnvironment()
    for option in ("--inspect", "--no-warnings", "--inspect"):
        environment.add_node_option(option)
    environment.add_exec_arg("--security-revert=CVE-1")
    environment.add_exec_arg("--security-revert=CVE-1")

    assert environment.node_options == ["--inspect", "--no-warnings"]
    assert environment.exec_argv == ["--security-revert=CVE-1"]


def test_copy_is_independent() -> None:
    original = RuntimeEnvironment(env={"A": "1"}, node_options=["--inspect"])
    clone = original.copy()
    clone.set_env("B", "2")
    clone.add_node_option("--no-warnings")

    assert original.env == {"A": "1"}
    assert original.node_options == ["--inspect"]


def test_merged_env_appends_to_inherited_node_options() -> None:
    environment = RuntimeEnvironment(env={"NODE_ENV": "test"}, node_options=["--inspect", "--max-old-space-size=4096"])

    merged = environment.merged_env({"NODE_OPTIONS": "--max-old-space-size=4096", "NODE_ENV": "production", "X": "y"})

    assert merged["NODE_ENV"] == "test"
    assert merged["X"] == "y"
    assert merged["NODE_OPTIONS"] == "--max-old-space-size=4096 --inspect"


def test_inherited_flag_sharing_a_prefix_does_not_hide_ours() -> None:
    environment = RuntimeEnvironment(node_options=["--inspect"])

    merged = environment.merged_env({"NODE_OPTIONS": "--inspect-brk=9230"})

    assert merged["NODE_OPTIONS"] == "--inspect-brk=9230 --inspect"


def test_two_token_options_are_compared_as_a_unit() -> None:
    hook = quote_node_option_path("--require", "/opt/hook.js")
    spaced = quote_node_option_path("--require", "/my app/hook.js")
    environment = RuntimeEnvironment(node_options=[hook, spaced])

    assert environment.node_options_value('--require "/my app/hook.js" --require /opt/hook.js') == (
        '--require "/my app/hook.js" --require /opt/hook.js'
    )
    assert environment.node_options_value("--require /opt/hook.js.bak") == (
        '--require /opt/hook.js.bak --require /opt/hook.js --require "/my app/hook.js"'
    )
    assert environment.node_options_value("--import /opt/hook.js") == (
        '--import /opt/hook.js --require /opt/hook.js --require "/my app/hook.js"'
    )


def test_unbalanced_inherited_quotes_fall_back_to_whitespace_split() -> None:
    environment = RuntimeEnvironment(node_options=["--inspect"])

    assert environment.node_options_value('--title="x') == '--title="x --inspect'
    assert environment.node_options_value('--title="x --inspect') == '--title="x --inspect'


def test_merged_env_leaves_node_options_unset_when_empty() -> None:
    assert "NODE_OPTIONS" not in RuntimeEnvironment().merged_env({})


def test_quote_node_option_path() -> None:
    assert quote_node_option_path("--require", "/opt/ts-node/register.js") == "--require /opt/ts-node/register.js"
    assert quote_node_option_path("--require", "/my app/register.js") == '--require "/my app/register.js"'
