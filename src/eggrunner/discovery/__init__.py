# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Test file discovery helpers."""

from __future__ import annotations

from .git import ChangedFilesDiscovery, GitRunner
from .patterns import expand_braces, expand_patterns, has_magic, is_excluded, split_patterns

__all__ = [
    "ChangedFilesDiscovery",
    "GitRunner",
    "expand_braces",
    "expand_patterns",
    "has_magic",
    "is_excluded",
    "split_patterns",
]
