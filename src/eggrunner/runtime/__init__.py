# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime environment resolution for the supervised child process."""

from __future__ import annotations

from .models import ProbeDecision, RuntimeEnvironment, RuntimeResolution
from .ports import detect_port, read_configured_port, resolve_dev_port
from .probes import TYPESCRIPT_PROBES, ProbeInput, run_cascade
from .resolver import RuntimeEnvironmentResolver, RuntimeRequest, resolve_framework

__all__ = [
    "ProbeDecision",
    "ProbeInput",
    "RuntimeEnvironment",
    "RuntimeEnvironmentResolver",
    "RuntimeRequest",
    "RuntimeResolution",
    "TYPESCRIPT_PROBES",
    "detect_port",
    "read_configured_port",
    "resolve_dev_port",
    "resolve_framework",
    "run_cascade",
]
