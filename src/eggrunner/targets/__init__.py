# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Test target resolution: file selection and mocha arguments."""

from __future__ import annotations

from .arguments import (
    MochaArguments,
    ReporterChoice,
    collect_requires,
    effective_timeout,
    resolve_reporter,
    split_grep,
)
from .files import (
    TargetFileResolver,
    TargetFileSet,
    TargetOutcome,
    TargetRequest,
    TargetTier,
)

__all__ = [
    "MochaArguments",
    "ReporterChoice",
    "TargetFileResolver",
    "TargetFileSet",
    "TargetOutcome",
    "TargetRequest",
    "TargetTier",
    "collect_requires",
    "effective_timeout",
    "resolve_reporter",
    "split_grep",
]
