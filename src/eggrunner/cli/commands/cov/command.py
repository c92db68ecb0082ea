# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command running the test suite with coverage."""

from __future__ import annotations

import typer

from ....constants import DEFAULT_C8_ARGS
from ....coverage import clean_coverage_output
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
from ..test.models import (
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
    build_mocha_options,
)
from ..test.services import build_mocha_plan, resolve_targets
from .models import C8_OPTION, EXCLUDE_OPTION, PREREQUIRE_OPTION, CovCLIOptions, build_cov_options
from .services import build_coverage_launch


def run_coverage(options: CovCLIOptions) -> int:
    """Resolve and launch mocha under c8, returning the exit status.

    Raises:
        CLIError: On configuration or resolution errors.
    """

    common = options.mocha.common
    logger = build_cli_logger(emoji=common.emoji, debug=common.debug)
    context = create_context(common, options.mocha)
    resolution = resolve_runtime(context, common.runtime_request())

    targets = resolve_targets(context, resolution)
    if targets.outcome is not TargetOutcome.FILES:
        logger.echo(targets.message or "")
        return 0

    plan = build_mocha_plan(context, resolution, targets)
    launch = build_coverage_launch(context, resolution, plan, options)
    if not common.dry_run:
        clean_coverage_output(context.base_dir)
    return launch_child(
        launch.c8_file,
        launch.argv,
        LaunchOptions(
            cwd=context.base_dir,
            environment=launch.environment,
            dry_run=common.dry_run,
            base_env=context.env,
        ),
        logger=logger,
    )


def cov_command(
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
    prerequire: PREREQUIRE_OPTION = False,
    exclude: EXCLUDE_OPTION = None,
    c8: C8_OPTION = DEFAULT_C8_ARGS,
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
    """Run the tests with c8 coverage.

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
    mocha = build_mocha_options(
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
    options = build_cov_options(mocha, prerequire=prerequire, exclude=exclude, c8=c8)
    try:
        code = run_coverage(options)
    except CLIError as exc:
        build_cli_logger(emoji=emoji).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=code)


__all__ = ["cov_command", "run_coverage"]
