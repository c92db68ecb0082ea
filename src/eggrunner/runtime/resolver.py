# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve how the supervised ``node`` child must be started.

The resolver answers, before anything is spawned, which language variant the
project uses, which compiler hook to inject, which runtime flags and security
reverts apply and whether timeouts must be disabled for a debugger. The answer
is returned as an immutable :class:`RuntimeResolution`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, MutableMapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Any

from ..constants import (
    DEFAULT_FRAMEWORK,
    DEFAULT_TS_COMPILER,
    ETS_CWD_ENV,
    TS_HELPER_BIN_MODULE,
    TS_NODE_ESM_LOADER,
    TS_NODE_FILES_ENV,
    TYPESCRIPT_ENV,
)
from ..context import InvocationContext
from ..manifest import PackageManifest, read_manifest
from ..modules import ModuleResolutionError, import_resolve, resolve_package_dir
from ..process import CommandOptions, run_command
from .models import RuntimeEnvironment, RuntimeResolution, quote_node_option_path
from .probes import ProbeInput, run_cascade

LOGGER = logging.getLogger(__name__)

CommandRunner = Callable[..., CompletedProcess[str]]


@dataclass(frozen=True, slots=True)
class RuntimeRequest:
    """Runtime-related flag values supplied on the command line."""

    typescript: bool | None = None
    legacy_ts: str | None = None
    tscompiler: str | None = None
    declarations: bool | None = None
    inspect: bool = False
    inspect_brk: bool = False
    command_default: bool | None = False


def _unique_paths(paths: Sequence[Path]) -> list[Path]:
    seen: list[Path] = []
    for path in paths:
        if path not in seen:
            seen.append(path)
    return seen


class RuntimeEnvironmentResolver:
    """Turn an :class:`InvocationContext` into a :class:`RuntimeResolution`."""

    def __init__(
        self,
        context: InvocationContext[Any],
        *,
        node: str = "node",
        runner: CommandRunner = run_command,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        """Bind the resolver to one command run.

        Args:
            context: Frozen invocation context.
            node: ``node`` executable used for helper processes.
            runner: Blocking command runner for helper processes.
            environ: Host environment that receives the language markers;
                defaults to :data:`os.environ`.
        """

        self._context = context
        self._node = node
        self._runner = runner
        self._environ = os.environ if environ is None else environ

    @property
    def tool_home(self) -> Path:
        return self._context.settings.node_home

    def resolve(self, request: RuntimeRequest) -> RuntimeResolution:
        """Run every resolution step in precedence order.

        Args:
            request: Runtime flag values from the command line.

        Returns:
            RuntimeResolution: Immutable resolution consumed by the command layer.

        Raises:
            ModuleResolutionError: If a required compiler module or the typings
                generator cannot be located.
            FileNotFoundError: If the typings generator cannot be spawned.
        """

        base_dir = self._context.base_dir
        manifest = read_manifest(base_dir)
        environment = RuntimeEnvironment()

        typescript, decision = run_cascade(
            ProbeInput(
                base_dir=base_dir,
                manifest=manifest,
                settings=self._context.settings,
                typescript_flag=request.typescript,
                legacy_ts_flag=request.legacy_ts,
                tscompiler_flag=request.tscompiler,
                command_default=request.command_default,
            ),
        )
        LOGGER.debug("typescript=%s decided by %s", typescript, decision.probe)

        tscompiler: Path | None = None
        if typescript:
            tscompiler = self._inject_compiler(environment, manifest, request.tscompiler)

        declarations = self._declarations_enabled(request, manifest)
        if declarations:
            self._generate_declarations(environment)

        for revert in manifest.egg.reverts:
            environment.add_exec_arg(f"--security-revert={revert}")

        if request.inspect:
            environment.add_node_option("--inspect")
        if request.inspect_brk:
            environment.add_node_option("--inspect-brk")

        timeout_override: int | None = None
        if request.inspect or request.inspect_brk or self._context.settings.ide_debug:
            timeout_override = 0

        return RuntimeResolution(
            base_dir=base_dir,
            manifest=manifest,
            typescript=typescript,
            is_esm=manifest.is_esm,
            environment=environment,
            tscompiler=tscompiler,
            declarations=declarations,
            timeout_override=timeout_override,
            decisions=(decision,),
        )

    def compiler_search_paths(self, override: str | None) -> list[Path]:
        """Return directories searched for the compiler hook.

        Args:
            override: Compiler name from ``--tscompiler`` or ``TS_COMPILER``.

        Returns:
            list[Path]: Project root first only for an explicit override; the
            project root is always the final fallback.
        """

        base_dir = self._context.base_dir
        paths = [base_dir] if override else []
        paths.extend((self.tool_home, base_dir))
        return _unique_paths(paths)

    def _inject_compiler(
        self,
        environment: RuntimeEnvironment,
        manifest: PackageManifest,
        flag_value: str | None,
    ) -> Path:
        override = flag_value or self._context.settings.ts_compiler
        name = override or DEFAULT_TS_COMPILER
        paths = self.compiler_search_paths(override)
        compiler = import_resolve(name, paths=paths)
        LOGGER.debug("tscompiler=%s resolved=%s", name, compiler)

        if manifest.is_esm:
            loader = import_resolve(TS_NODE_ESM_LOADER, paths=paths)
            environment.add_node_option(f"--import {compiler.as_uri()}")
            environment.add_node_option(f"--loader {loader.as_uri()}")
            environment.add_node_option("--no-warnings")
        else:
            environment.add_node_option(quote_node_option_path("--require", str(compiler)))

        ts_node_files = self._context.env.get(TS_NODE_FILES_ENV) or "true"
        for key, value in ((TYPESCRIPT_ENV, "true"), (TS_NODE_FILES_ENV, ts_node_files)):
            environment.set_env(key, value)
            self._environ[key] = value
        return compiler

    @staticmethod
    def _declarations_enabled(request: RuntimeRequest, manifest: PackageManifest) -> bool:
        if request.declarations is not None:
            return request.declarations
        return manifest.egg.declarations_flag is True

    def _generate_declarations(self, environment: RuntimeEnvironment) -> None:
        base_dir = self._context.base_dir
        helper = import_resolve(TS_HELPER_BIN_MODULE, paths=_unique_paths([base_dir, self.tool_home]))
        env = environment.merged_env(self._context.env)
        env[ETS_CWD_ENV] = str(base_dir)
        LOGGER.debug("generating declarations with %s", helper)
        completed = self._runner(
            [self._node, str(helper)],
            options=CommandOptions(cwd=base_dir, env=env, check=False),
        )
        if completed.returncode != 0:
            LOGGER.warning("declaration generator exited with code %s", completed.returncode)


def resolve_framework(base_dir: Path, framework: str | None, manifest: PackageManifest) -> Path:
    """Return the framework package directory used by the dev server.

    Args:
        base_dir: Application root.
        framework: ``--framework`` value (absolute path or package name).
        manifest: Parsed application manifest.

    Returns:
        Path: Framework directory.

    Raises:
        ModuleResolutionError: If the framework package is not installed.
    """

    configured = manifest.egg.framework if isinstance(manifest.egg.framework, str) else None
    name = framework or configured or DEFAULT_FRAMEWORK
    candidate = Path(name)
    if candidate.is_absolute():
        return candidate
    resolved = resolve_package_dir(name, paths=[base_dir])
    if resolved is None:
        raise ModuleResolutionError(name, [base_dir])
    return resolved


__all__ = [
    "RuntimeEnvironmentResolver",
    "RuntimeRequest",
    "resolve_framework",
]
