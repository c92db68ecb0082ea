# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command running the project's mocha test suite."""

from __future__ import annotations

import typer

from ....supervisor import LaunchOptions
from ....targets.files import TargetOutcome
from ...execution import create_context, launch_child, resolve_runtime
from ...options import (
    BASE_OPTION,
    DEBUG_OPTION,
    DECLARATIONS_OPTION,
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    INSPECT_BRK_OPTION,
    INSPECT_OPTION,
    LEGACY_TS_OPTION,
    REQUIRE_OPTION,
    TSCOMPILER_OPTION,
    TYPESCRIPT_OPTION,
    build_common_options,
)
from ...shared import CLIError, build_cli_logger
from .models import (
    AUTO_AGENT_OPTION,
    BAIL_OPTION,
    CHANGED_OPTION,
    FILES_ARGUMENT,
    GREP_OPTION,
    JOBS_OPTION,
    MOCHAWESOME_OPTION,
    NO_TIMEOUT_OPTION,
    PARALLEL_OPTION,
    TIMEOUT_OPTION,
    MochaCLIOptions,
    build_mocha_options,
)
from .services import build_mocha_plan, resolve_targets


def run_mocha(options: MochaCLIOptions) -> int:
    """Resolve and launch mocha, returning the exit status.

    Args:
        options: Structured test command options.

    Returns:
        int: Exit status for the host process.

    Raises:
        CLIError: On configuration or resolution errors.
    """

    common = options.common
    logger = build_cli_logger(emoji=common.emoji, debug=common.debug)
    context = create_context(common, options)
    resolution = resolve_runtime(context, common.runtime_request())

    targets = resolve_targets(context, resolution)
    if targets.outcome is not TargetOutcome.FILES:
        logger.echo(targets.message or "")
        return 0

    plan = build_mocha_plan(context, resolution, targets)
    launch = LaunchOptions(
        cwd=context.base_dir,
        environment=plan.environment,
        dry_run=common.dry_run,
        base_env=context.env,
    )
    return launch_child(plan.mocha_file, plan.argv, launch, logger=logger)


def mocha_command(
    files: FILES_ARGUMENT = None,
    base: BASE_OPTION = None,
    require: REQUIRE_OPTION = None,
    grep: GREP_OPTION = None,
    timeout: TIMEOUT_OPTION = None,
    no_timeout: NO_TIMEOUT_OPTION = False,
    bail: BAIL_OPTION = False,
    changed: CHANGED_OPTION = False,
    parallel: PARALLEL_OPTION = False,
    jobs: JOBS_OPTION = None,
    mochawesome: MOCHAWESOME_OPTION = True,
    auto_agent: AUTO_AGENT_OPTION = True,
    typescript: TYPESCRIPT_OPTION = None,
    ts: LEGACY_TS_OPTION = None,
    tscompiler: TSCOMPILER_OPTION = None,
    declarations: DECLARATIONS_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    inspect: INSPECT_OPTION = False,
    inspect_brk: INSPECT_BRK_OPTION = False,
    debug: DEBUG_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Run the tests with mocha.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    common = build_common_options(
        base=base,
        require=require,
        dry_run=dry_run,
        typescript=typescript,
        ts=ts,
        tscompiler=tscompiler,
        declarations=declarations,
        inspect=inspect,
        inspect_brk=inspect_brk,
        debug=debug,
        emoji=emoji,
    )
    options = build_mocha_options(
        common,
        files=files,
        grep=grep,
        timeout=timeout,
        no_timeout=no_timeout,
        bail=bail,
        changed=changed,
        parallel=parallel,
        jobs=jobs,
        mochawesome=mochawesome,
        auto_agent=auto_agent,
    )
    try:
        code = run_mocha(options)
    except CLIError as exc:
        build_cli_logger(emoji=emoji).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=code)


__all__ = ["mocha_command", "run_mocha"]
