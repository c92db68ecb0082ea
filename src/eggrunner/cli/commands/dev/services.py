# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helper services assembling the development cluster launch."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ....constants import (
    MASTER_CLOSE_TIMEOUT_ENV,
    NODE_ENV_ENV,
    RESOLUTION_ERROR_EXIT_CODE,
    START_CLUSTER_SCRIPT,
)
from ....context import InvocationContext
from ....modules import ModuleResolutionError
from ....runtime.models import RuntimeEnvironment, RuntimeResolution
from ....runtime.ports import detect_port, read_configured_port, resolve_dev_port
from ....runtime.resolver import resolve_framework
from ....targets.arguments import collect_requires
from ...shared import CLIError
from .models import DevCLIOptions

PortReader = Callable[..., int | None]


@dataclass(frozen=True, slots=True)
class DevLaunch:
    """Launch inputs for the cluster starter script."""

    script: Path
    argv: tuple[str, ...]
    environment: RuntimeEnvironment
    start_options: dict[str, object]


def format_import_flag(module: str, *, is_esm: bool) -> str:
    """Return ``--import=<m>`` for ES modules or ``--require=<m>`` for CommonJS.

    Absolute paths become ``file://`` URLs for ``--import``.
    """

    if not is_esm:
        return f"--require={module}"
    path = Path(module)
    return f"--import={path.as_uri() if path.is_absolute() else module}"


def build_dev_launch(
    context: InvocationContext[DevCLIOptions],
    resolution: RuntimeResolution,
    *,
    warn: Callable[[str], None],
    read_port: PortReader = read_configured_port,
    detect: Callable[[int], int] = detect_port,
) -> DevLaunch:
    """Assemble the cluster starter invocation.

    Args:
        context: Invocation context carrying the dev options.
        resolution: Runtime resolution for the project.
        warn: Sink for the port-unavailable warning.
        read_port: Reader for the port configured by the application.
        detect: Free-port detector.

    Returns:
        DevLaunch: Launch inputs for the supervisor.

    Raises:
        CLIError: If the framework cannot be located.
    """

    options = context.options
    environment = resolution.environment.copy()
    environment.set_env(NODE_ENV_ENV, context.env.get(NODE_ENV_ENV) or "development")
    environment.set_env(MASTER_CLOSE_TIMEOUT_ENV, "1000")

    requires = collect_requires(options.common.requires, resolution.manifest, context.base_dir, auto_mock=False)
    for module in requires:
        environment.add_exec_arg(format_import_flag(module, is_esm=resolution.is_esm))

    try:
        framework = resolve_framework(context.base_dir, options.framework, resolution.manifest)
    except ModuleResolutionError as exc:
        raise CLIError(str(exc), exit_code=RESOLUTION_ERROR_EXIT_CODE) from exc

    child_env = environment.merged_env(context.env)
    port = resolve_dev_port(
        options.port,
        configured=lambda: read_port(context.base_dir, framework, env=child_env),
        default_port=context.settings.default_port,
        warn=warn,
        detect=detect,
    )
    start_options: dict[str, object] = {
        "baseDir": str(context.base_dir),
        "workers": options.workers,
        "port": port,
        "framework": str(framework),
        "typescript": resolution.typescript,
        "tscompiler": str(resolution.tscompiler) if resolution.tscompiler else None,
        "sticky": options.sticky,
    }
    return DevLaunch(
        script=START_CLUSTER_SCRIPT,
        argv=(json.dumps(start_options),),
        environment=environment,
        start_options=start_options,
    )


__all__ = ["DevLaunch", "build_dev_launch", "format_import_flag"]
