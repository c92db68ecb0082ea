# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Listening-port selection for the development server."""

from __future__ import annotations

import json
import logging
import socket
from collections.abc import Callable, Mapping
from pathlib import Path

from ..constants import READ_CONFIG_SCRIPT
from ..process import CommandOptions, SubprocessExecutionError, run_command

LOGGER = logging.getLogger(__name__)

MAX_PORT = 65535
PORT_SCAN_LIMIT = 20
CONFIG_READ_TIMEOUT = 30.0

PortWarning = Callable[[str], None]


def is_port_available(port: int, host: str = "") -> bool:
    """Return whether a TCP listener can bind ``port`` on ``host``.

    Args:
        port: Port number to probe.
        host: Interface to bind; empty string means every interface.

    Returns:
        bool: ``True`` when the bind succeeded.
    """

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def _ephemeral_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("", 0))
        return int(sock.getsockname()[1])


def detect_port(preferred: int, *, probe: Callable[[int], bool] = is_port_available) -> int:
    """Return ``preferred`` when free, else the next free port.

    A short range above ``preferred`` is scanned before falling back to an
    OS-assigned ephemeral port.

    Args:
        preferred: Port the caller would like to use.
        probe: Availability check, replaceable in tests.

    Returns:
        int: Port that was free at the time of the check.
    """

    upper = min(preferred + PORT_SCAN_LIMIT, MAX_PORT + 1)
    for candidate in range(preferred, upper):
        if probe(candidate):
            return candidate
    return _ephemeral_port()


def read_configured_port(
    base_dir: Path,
    framework: Path | str,
    *,
    env: Mapping[str, str] | None = None,
    node: str = "node",
) -> int | None:
    """Return ``config.cluster.listen.port`` as loaded by the framework.

    The framework's own loader runs in a helper ``node`` process because the
    configuration files are JavaScript. Every failure is swallowed.

    Args:
        base_dir: Application root.
        framework: Framework package directory or name.
        env: Environment for the helper process.
        node: ``node`` executable.

    Returns:
        int | None: Configured port, or ``None`` when unset or unreadable.
    """

    payload = json.dumps({"baseDir": str(base_dir), "framework": str(framework), "env": "local"})
    options = CommandOptions(
        cwd=base_dir,
        env=env,
        capture_output=True,
        timeout=CONFIG_READ_TIMEOUT,
        discard_stdin=True,
    )
    try:
        completed = run_command([node, str(READ_CONFIG_SCRIPT), payload], options=options)
        port = json.loads(completed.stdout.strip().splitlines()[-1]).get("port")
    except (FileNotFoundError, SubprocessExecutionError, IndexError, AttributeError, ValueError) as exc:
        LOGGER.debug(
            "config read failed framework=%s base=%s env=local error=%s",
            framework,
            base_dir,
            exc,
        )
        return None
    if isinstance(port, int) and not isinstance(port, bool) and port > 0:
        LOGGER.debug("use port %s from configuration file", port)
        return port
    return None


def resolve_dev_port(
    explicit: int | None,
    *,
    configured: Callable[[], int | None],
    default_port: int,
    warn: PortWarning,
    detect: Callable[[int], int] = detect_port,
) -> int:
    """Pick the development server port.

    Args:
        explicit: Value of ``--port``; wins when set.
        configured: Lazy reader for the port in the application config.
        default_port: Preferred port when nothing is configured.
        warn: Sink for the "port unavailable" warning.
        detect: Free-port detector.

    Returns:
        int: Port handed to the cluster starter.
    """

    if explicit:
        return explicit
    port = configured()
    if port:
        return port
    detected = detect(default_port)
    if detected != default_port:
        warn(f"server port {default_port} is unavailable, now using port {detected}")
    LOGGER.debug("use available port %s", detected)
    return detected


__all__ = [
    "detect_port",
    "is_port_available",
    "read_configured_port",
    "resolve_dev_port",
]
