# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ordered probes deciding whether the child runs the TypeScript toolchain.

Each probe is a pure function of :class:`ProbeInput` returning ``True``,
``False`` or ``None`` (no opinion). :func:`run_cascade` walks the probes in
order and stops at the first decision.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..bool_utils import parse_strict_bool
from ..constants import TYPESCRIPT_PACKAGE
from ..context import RunnerSettings
from ..manifest import PackageManifest, has_tsconfig
from .models import ProbeDecision

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProbeInput:
    """Everything the language-variant probes may look at."""

    base_dir: Path
    manifest: PackageManifest
    settings: RunnerSettings
    typescript_flag: bool | None = None
    legacy_ts_flag: str | None = None
    tscompiler_flag: str | None = None
    command_default: bool | None = None


Probe = Callable[[ProbeInput], bool | None]


@dataclass(frozen=True, slots=True)
class NamedProbe:
    """Probe paired with the label used in debug traces."""

    name: str
    probe: Probe

    def __call__(self, data: ProbeInput) -> bool | None:
        return self.probe(data)


def probe_typescript_flag(data: ProbeInput) -> bool | None:
    return data.typescript_flag


def probe_legacy_ts_flag(data: ProbeInput) -> bool | None:
    # deprecated ``--ts true|false``
    return parse_strict_bool(data.legacy_ts_flag)


def probe_environment_toggle(data: ProbeInput) -> bool | None:
    return data.settings.typescript


def probe_manifest_field(data: ProbeInput) -> bool | None:
    return data.manifest.egg.typescript_flag


def probe_dependency(data: ProbeInput) -> bool | None:
    return True if data.manifest.declares_dependency(TYPESCRIPT_PACKAGE) else None


def probe_tsconfig(data: ProbeInput) -> bool | None:
    return True if has_tsconfig(data.base_dir) else None


def probe_tscompiler_flag(data: ProbeInput) -> bool | None:
    return True if data.tscompiler_flag else None


def probe_command_default(data: ProbeInput) -> bool | None:
    return data.command_default


TYPESCRIPT_PROBES: tuple[NamedProbe, ...] = (
    NamedProbe("flag --typescript", probe_typescript_flag),
    NamedProbe("flag --ts", probe_legacy_ts_flag),
    NamedProbe("env EGG_TYPESCRIPT", probe_environment_toggle),
    NamedProbe("package.json egg.typescript", probe_manifest_field),
    NamedProbe("package.json dependency typescript", probe_dependency),
    NamedProbe("tsconfig.json", probe_tsconfig),
    NamedProbe("flag --tscompiler", probe_tscompiler_flag),
    NamedProbe("command default", probe_command_default),
)


def run_cascade(
    data: ProbeInput,
    probes: Sequence[NamedProbe] = TYPESCRIPT_PROBES,
) -> tuple[bool, ProbeDecision]:
    """Return the first decision made by ``probes``.

    Args:
        data: Probe input for the current invocation.
        probes: Ordered probes; earlier entries take precedence.

    Returns:
        tuple[bool, ProbeDecision]: Resolved flag (``False`` when no probe
        decided) and the decision trace entry.
    """

    for probe in probes:
        value = probe(data)
        LOGGER.debug("typescript probe=%r value=%s", probe.name, value)
        if value is not None:
            return value, ProbeDecision(probe=probe.name, value=value)
    return False, ProbeDecision(probe="undetermined", value=None)


__all__ = [
    "NamedProbe",
    "Probe",
    "ProbeInput",
    "TYPESCRIPT_PROBES",
    "run_cascade",
]
