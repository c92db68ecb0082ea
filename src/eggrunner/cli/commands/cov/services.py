# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Wrap the mocha launch with the c8 coverage tool."""

from __future__ import annotations

from dataclasses import dataclass

from ....constants import C8_MODULE, PREREQUIRE_ENV, RESOLUTION_ERROR_EXIT_CODE
from ....context import InvocationContext
from ....coverage import build_coverage_plan
from ....modules import ModuleResolutionError, import_resolve
from ....runtime.models import RuntimeEnvironment, RuntimeResolution
from ...shared import CLIError
from ..test.models import MochaCLIOptions
from ..test.services import MochaPlan, module_search_paths
from .models import CovCLIOptions


@dataclass(frozen=True, slots=True)
class CoverageLaunch:
    """Launch inputs for ``node c8.js <c8 args> node <exec argv> mocha <mocha args>``."""

    c8_file: str
    argv: tuple[str, ...]
    environment: RuntimeEnvironment


def resolve_c8_file(context: InvocationContext[MochaCLIOptions]) -> str:
    """Return the installed ``c8/bin/c8.js``.

    Raises:
        CLIError: If c8 is not installed.
    """

    try:
        return str(import_resolve(C8_MODULE, paths=module_search_paths(context)))
    except ModuleResolutionError as exc:
        raise CLIError(str(exc), exit_code=RESOLUTION_ERROR_EXIT_CODE) from exc


def build_coverage_launch(
    context: InvocationContext[MochaCLIOptions],
    resolution: RuntimeResolution,
    plan: MochaPlan,
    options: CovCLIOptions,
    *,
    node: str = "node",
) -> CoverageLaunch:
    """Wrap ``plan`` so the mocha process runs under c8.

    The runtime flags that mocha needs move behind the inner ``node``; c8
    itself starts without them.

    Args:
        context: Invocation context for the test options.
        resolution: Runtime resolution for the project.
        plan: Mocha launch plan.
        options: Coverage options.
        node: ``node`` executable for the inner process.

    Returns:
        CoverageLaunch: Launch inputs for the supervisor.
    """

    coverage = build_coverage_plan(
        context.base_dir,
        c8_args=options.c8_args,
        typescript=resolution.typescript,
        env_excludes=context.settings.coverage_excludes,
        flag_excludes=options.excludes,
    )
    environment = plan.environment.copy()
    inner_exec_argv = list(environment.exec_argv)
    environment.exec_argv.clear()
    if options.prerequire:
        environment.set_env(PREREQUIRE_ENV, "true")
    for key, value in coverage.env:
        environment.set_env(key, value)

    argv = (*coverage.args, node, *inner_exec_argv, plan.mocha_file, *plan.argv)
    return CoverageLaunch(c8_file=resolve_c8_file(context), argv=argv, environment=environment)


__all__ = ["CoverageLaunch", "build_coverage_launch", "resolve_c8_file"]
