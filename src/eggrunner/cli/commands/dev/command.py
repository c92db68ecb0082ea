# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command starting the application cluster in development mode."""

from __future__ import annotations

import typer

from ....supervisor import LaunchOptions
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
    FRAMEWORK_OPTION,
    PORT_OPTION,
    STICKY_OPTION,
    WORKERS_OPTION,
    DevCLIOptions,
    build_dev_options,
)
from .services import build_dev_launch


def run_dev(options: DevCLIOptions) -> int:
    """Resolve and launch the development cluster, returning the exit status.

    Raises:
        CLIError: On configuration or resolution errors.
    """

    common = options.common
    logger = build_cli_logger(emoji=common.emoji, debug=common.debug)
    context = create_context(common, options)
    resolution = resolve_runtime(context, common.runtime_request())
    launch = build_dev_launch(context, resolution, warn=logger.warn)
    logger.debug(f"start options={launch.argv[0]}")
    return launch_child(
        launch.script,
        launch.argv,
        LaunchOptions(
            cwd=context.base_dir,
            environment=launch.environment,
            dry_run=common.dry_run,
            base_env=context.env,
        ),
        logger=logger,
    )


def dev_command(
    base: BASE_OPTION = None,
    port: PORT_OPTION = None,
    workers: WORKERS_OPTION = 1,
    framework: FRAMEWORK_OPTION = None,
    sticky: STICKY_OPTION = False,
    require: REQUIRE_OPTION = None,
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
    """Start the server in local development mode.

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
    options = build_dev_options(common, port=port, workers=workers, framework=framework, sticky=sticky)
    try:
        code = run_dev(options)
    except CLIError as exc:
        build_cli_logger(emoji=emoji).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=code)


__all__ = ["dev_command", "run_dev"]
