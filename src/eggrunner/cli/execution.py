# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Command-boundary helpers: context creation, resolution and launch."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import TypeVar

from ..constants import BASE_DIR_MISSING_EXIT_CODE, RESOLUTION_ERROR_EXIT_CODE
from ..context import InvocationContext
from ..logging import configure_debug_logging
from ..modules import ModuleResolutionError
from ..runtime.models import RuntimeResolution
from ..runtime.resolver import RuntimeEnvironmentResolver, RuntimeRequest
from ..supervisor import ChildProcessFailure, LaunchOptions, ProcessSupervisor
from .options import CommonOptions
from .shared import CLIError, CLILogger

OptionsT = TypeVar("OptionsT")


def create_context(common: CommonOptions, options: OptionsT) -> InvocationContext[OptionsT]:
    """Validate the base directory and snapshot the invocation.

    Args:
        common: Options shared by every command.
        options: Command-specific options stored on the context.

    Returns:
        InvocationContext: Frozen context for the command run.

    Raises:
        CLIError: If the base directory does not exist.
    """

    base_dir = common.base.resolve()
    if not base_dir.is_dir():
        raise CLIError(f"baseDir: {base_dir} not exists", exit_code=BASE_DIR_MISSING_EXIT_CODE)
    context = InvocationContext.create(base_dir, options)
    configure_debug_logging(common.debug or context.settings.debug)
    return context


def resolve_runtime(context: InvocationContext[OptionsT], request: RuntimeRequest) -> RuntimeResolution:
    """Run the runtime environment resolver, translating resolution errors.

    Raises:
        CLIError: If a required module cannot be located.
    """

    try:
        return RuntimeEnvironmentResolver(context).resolve(request)
    except ModuleResolutionError as exc:
        raise CLIError(str(exc), exit_code=RESOLUTION_ERROR_EXIT_CODE) from exc


def launch_child(
    executable: Path | str,
    argv: Sequence[str],
    options: LaunchOptions,
    *,
    logger: CLILogger,
    supervisor: ProcessSupervisor | None = None,
) -> int:
    """Launch the supervised child and return the exit status for the host.

    Args:
        executable: Script run by ``node``.
        argv: Script arguments.
        options: Launch options.
        logger: CLI logger used for failures and dry-run output.
        supervisor: Supervisor to use; a default one is created when omitted.

    Returns:
        int: ``0`` on success or dry run, otherwise the child's status.

    Raises:
        CLIError: If ``node`` cannot be started.
    """

    active = supervisor or ProcessSupervisor(echo=logger.echo)
    try:
        asyncio.run(active.launch(executable, argv, options))
    except ChildProcessFailure as exc:
        logger.fail(str(exc))
        return exc.exit_code
    except OSError as exc:
        raise CLIError(f"failed to start {options.node}: {exc}") from exc
    return 0


__all__ = ["create_context", "launch_child", "resolve_runtime"]
