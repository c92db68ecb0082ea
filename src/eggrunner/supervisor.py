# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Spawn and supervise the ``node`` child process of a command.

The :class:`ChildRegistry` tracks every running child for the lifetime of the
host process. The first launch installs handlers for ``SIGINT``, ``SIGQUIT``
and ``SIGTERM`` that record the signal and exit; an ``atexit`` hook then sends
that signal (``SIGTERM`` by default) to every registered child exactly once.
"""

from __future__ import annotations

import asyncio
import atexit
import logging
import os
import shlex
import signal
import threading
from collections.abc import Awaitable, Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import FrameType
from typing import Protocol

from .constants import NODE_OPTIONS_ENV
from .runtime.models import RuntimeEnvironment

LOGGER = logging.getLogger(__name__)

FORWARDED_SIGNALS: tuple[str, ...] = ("SIGINT", "SIGQUIT", "SIGTERM")
DEFAULT_SHUTDOWN_SIGNAL = signal.SIGTERM
SIGNALLED_EXIT_CODE = 1


class ProcessHandle(Protocol):
    """Subset of :class:`asyncio.subprocess.Process` used by the supervisor."""

    @property
    def pid(self) -> int: ...

    @property
    def returncode(self) -> int | None: ...

    def send_signal(self, sig: int) -> None: ...

    def wait(self) -> Awaitable[int]: ...


Spawner = Callable[..., Awaitable[ProcessHandle]]
Echo = Callable[[str], None]


@dataclass(slots=True, eq=False)
class ChildRecord:
    """Running child process and the signal chosen to stop it."""

    process: ProcessHandle
    command: tuple[str, ...] = ()
    kill_signal: signal.Signals | None = None


class ChildRegistry:
    """Process-wide set of running children.

    One instance is created at import time and handed to every
    :class:`ProcessSupervisor`; tests build their own.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: list[ChildRecord] = []
        self._signal: signal.Signals | None = None
        self._hooks_installed = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[ChildRecord]:
        with self._lock:
            return iter(list(self._records))

    def add(self, record: ChildRecord) -> None:
        with self._lock:
            self._records.append(record)

    def remove(self, record: ChildRecord) -> None:
        with self._lock:
            if record in self._records:
                self._records.remove(record)

    @property
    def shutdown_signal(self) -> signal.Signals:
        """Return the recorded signal, or ``SIGTERM`` when none arrived."""

        return self._signal or DEFAULT_SHUTDOWN_SIGNAL

    def record_signal(self, sig: signal.Signals) -> None:
        # Runs inside signal handlers, which may interrupt a holder of the lock.
        self._signal = sig

    def handle_signal(self, signum: int, _frame: FrameType | None) -> None:
        """Record ``signum`` and start an orderly exit of the host process.

        Raises:
            SystemExit: Always, with status ``0``.
        """

        self.record_signal(signal.Signals(signum))
        LOGGER.debug("received %s, shutting down", signal.Signals(signum).name)
        raise SystemExit(0)

    def terminate_all(self) -> list[ChildRecord]:
        """Send the shutdown signal to every child once and clear the registry.

        Returns:
            list[ChildRecord]: Records that were registered.
        """

        with self._lock:
            records, self._records = self._records, []
            sig = self._signal or DEFAULT_SHUTDOWN_SIGNAL
        for record in records:
            record.kill_signal = sig
            if record.process.returncode is not None:
                continue
            LOGGER.debug("kill child pid=%s with %s", record.process.pid, sig.name)
            try:
                record.process.send_signal(sig)
            except ProcessLookupError:
                LOGGER.debug("child pid=%s already exited", record.process.pid)
        return records

    def install_hooks(self) -> bool:
        """Install the signal handlers and exit hook once per registry.

        Returns:
            bool: ``True`` when this call installed the hooks.
        """

        with self._lock:
            if self._hooks_installed:
                return False
            self._hooks_installed = True
        if threading.current_thread() is threading.main_thread():
            for name in FORWARDED_SIGNALS:
                sig = getattr(signal, name, None)
                if sig is not None:
                    signal.signal(sig, self.handle_signal)
        else:
            LOGGER.debug("signal handlers skipped outside the main thread")
        atexit.register(self.terminate_all)
        return True


CHILD_REGISTRY = ChildRegistry()


class ChildProcessFailure(RuntimeError):
    """Raised when the supervised child exits non-zero or is killed by a signal.

    ``code`` is ``None`` when the child was terminated by a signal.
    """

    def __init__(self, command: Sequence[str], code: int | None) -> None:
        super().__init__(f"{format_command(command)} exit with code {code}")
        self.command = tuple(command)
        self.code = code

    @property
    def exit_code(self) -> int:
        """Return the status the host process should exit with."""

        return self.code if self.code is not None else SIGNALLED_EXIT_CODE


@dataclass(frozen=True, slots=True)
class LaunchOptions:
    """How to start the child.

    Attributes:
        cwd: Working directory, normally the project root.
        environment: Environment overlay and runtime flags.
        exec_argv: Extra ``node`` command-line flags after the resolved ones.
        dry_run: Print the command instead of running it.
        node: ``node`` executable.
        base_env: Inherited environment; defaults to :data:`os.environ`.
    """

    cwd: Path
    environment: RuntimeEnvironment = field(default_factory=RuntimeEnvironment)
    exec_argv: tuple[str, ...] = ()
    dry_run: bool = False
    node: str = "node"
    base_env: Mapping[str, str] | None = None


@dataclass(frozen=True, slots=True)
class LaunchResult:
    """Outcome of a successful or dry-run launch."""

    command: tuple[str, ...]
    returncode: int = 0
    dry_run: bool = False
    pid: int | None = None


def format_command(command: Sequence[str]) -> str:
    return shlex.join(command)


def _stdout_echo(line: str) -> None:
    print(line, flush=True)


class ProcessSupervisor:
    """Launch one ``node`` child at a time and report how it ended."""

    def __init__(
        self,
        registry: ChildRegistry = CHILD_REGISTRY,
        *,
        echo: Echo = _stdout_echo,
        spawn: Spawner | None = None,
    ) -> None:
        """Create a supervisor bound to ``registry``.

        Args:
            registry: Registry that tracks running children.
            echo: Sink for dry-run output.
            spawn: Process factory; defaults to
                :func:`asyncio.create_subprocess_exec`.
        """

        self._registry = registry
        self._echo = echo
        self._spawn: Spawner = spawn or asyncio.create_subprocess_exec

    @property
    def registry(self) -> ChildRegistry:
        return self._registry

    @staticmethod
    def build_command(executable: Path | str, argv: Sequence[str], options: LaunchOptions) -> list[str]:
        """Return ``node <exec argv> <executable> <argv>``."""

        exec_argv = [*options.environment.exec_argv]
        exec_argv.extend(arg for arg in options.exec_argv if arg not in exec_argv)
        return [options.node, *exec_argv, str(executable), *argv]

    async def launch(
        self,
        executable: Path | str,
        argv: Sequence[str],
        options: LaunchOptions,
    ) -> LaunchResult:
        """Run ``executable`` under ``node`` and wait for it to exit.

        Args:
            executable: Script passed to ``node``.
            argv: Script arguments.
            options: Launch options.

        Returns:
            LaunchResult: Result for a zero exit or a dry run.

        Raises:
            ChildProcessFailure: If the child exits non-zero or is killed by a signal.
            FileNotFoundError: If ``node`` cannot be executed.
        """

        command = self.build_command(executable, argv, options)
        if options.dry_run:
            self._echo(f"dry run: $ {format_command(command)}")
            return LaunchResult(command=tuple(command), dry_run=True)

        self._registry.install_hooks()
        env = options.environment.merged_env(os.environ if options.base_env is None else options.base_env)
        process = await self._spawn(*command, cwd=str(options.cwd), env=env)
        record = ChildRecord(process=process, command=tuple(command))
        self._registry.add(record)
        node_options = env.get(NODE_OPTIONS_ENV)
        LOGGER.debug(
            "run pid=%s\n$ %s%s",
            process.pid,
            f"NODE_OPTIONS={shlex.quote(node_options)} " if node_options else "",
            format_command(command),
        )
        try:
            returncode = await process.wait()
        except BaseException:
            self._registry.terminate_all()
            raise
        finally:
            self._registry.remove(record)

        LOGGER.debug("pid=%s exit code %s", process.pid, returncode)
        if returncode != 0:
            raise ChildProcessFailure(command, returncode if returncode > 0 else None)
        return LaunchResult(command=tuple(command), returncode=returncode, pid=process.pid)


__all__ = [
    "CHILD_REGISTRY",
    "ChildProcessFailure",
    "ChildRecord",
    "ChildRegistry",
    "LaunchOptions",
    "LaunchResult",
    "ProcessSupervisor",
    "format_command",
]
