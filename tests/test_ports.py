# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for development server port selection."""

from __future__ import annotations

import socket
from pathlib import Path

from eggrunner.runtime.ports import detect_port, is_port_available, read_configured_port, resolve_dev_port


def test_detect_port_scans_upwards() -> None:
    busy = {7001, 7002}

    assert detect_port(7001, probe=lambda port: port not in busy) == 7003
    assert detect_port(7005, probe=lambda port: True) == 7005


def test_detect_port_falls_back_to_ephemeral() -> None:
    port = detect_port(7001, probe=lambda port: False)

    assert 0 < port <= 65535


def test_is_port_available_reports_bound_port() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.listen()
        port = sock.getsockname()[1]

        assert not is_port_available(port, "127.0.0.1")


def test_explicit_port_wins() -> None:
    def configured() -> int | None:
        raise AssertionError("configuration must not be read")

    assert resolve_dev_port(8080, configured=configured, default_port=7001, warn=print) == 8080


def test_configured_port_beats_detection() -> None:
    warnings: list[str] = []

    port = resolve_dev_port(
        None,
        configured=lambda: 9000,
        default_port=7001,
        warn=warnings.append,
        detect=lambda preferred: 1,
    )

    assert port == 9000
    assert warnings == []


def test_unavailable_default_port_warns() -> None:
    warnings: list[str] = []

    port = resolve_dev_port(
        None,
        configured=lambda: None,
        default_port=7001,
        warn=warnings.append,
        detect=lambda preferred: preferred + 2,
    )

    assert port == 7003
    assert warnings == ["server port 7001 is unavailable, now using port 7003"]


def test_available_default_port_is_silent() -> None:
    warnings: list[str] = []

    port = resolve_dev_port(None, configured=lambda: None, default_port=7001, warn=warnings.append, detect=int)

    assert port == 7001
    assert warnings == []


def test_read_configured_port_swallows_missing_node(tmp_path: Path) -> None:
    assert read_configured_port(tmp_path, "egg", node="eggrunner-missing-node-binary") is None
