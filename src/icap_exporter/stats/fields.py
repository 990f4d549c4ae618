# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Declarative field tables for the ICAP statistics page."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from ..config import DEFAULT_SERVICE
from ..icap.requests import service_wire_name

# Assumed binary kilobytes; the statistics page only prints "Kbs".
KILOBYTE = 1024


class FieldUnit(str, Enum):
    COUNT = "count"
    KILOBYTES_AND_BYTES = "kilobytes_and_bytes"


@dataclass(frozen=True)
class FieldSpec:
    """One counter: attribute name, literal label preceding the value, and value encoding."""

    name: str
    label: str
    unit: FieldUnit = FieldUnit.COUNT
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.unit is FieldUnit.KILOBYTES_AND_BYTES:
            regex = re.escape(self.label) + r" *([0-9]*) Kbs ([0-9]*) bytes"
        else:
            regex = re.escape(self.label) + r" *([0-9]*)"
        object.__setattr__(self, "pattern", re.compile(regex))


SERVER_PROCESS_LABELS: tuple[tuple[str, str], ...] = (
    ("children", "Children number:"),
    ("free", "Free Servers:"),
    ("used", "Used Servers:"),
    ("started", "Started Processes:"),
    ("closed", "Closed Processes:"),
    ("crashed", "Crashed Processes:"),
    ("closing", "Closing Processes:"),
)

WORKLOAD_COUNT_LABELS: tuple[tuple[str, str], ...] = (
    ("reqmods", "REQMODS :"),
    ("respmods", "RESPMODS :"),
    ("options", "OPTIONS :"),
    ("allow204", "ALLOW 204 :"),
    ("requests_scanned", "REQUESTS SCANNED :"),
    ("rebuild_failures", "REBUILD FAILURES :"),
    ("rebuild_errors", "REBUILD ERRORS :"),
    ("scan_rebuilt", "SCAN REBUILT :"),
    ("unprocessed", "UNPROCESSED :"),
    ("unprocessable", "UNPROCESSABLE :"),
)

WORKLOAD_BYTE_LABELS: tuple[tuple[str, str], ...] = (
    ("bytes_in", "BYTES IN :"),
    ("bytes_out", "BYTES OUT :"),
    ("http_bytes_in", "HTTP BYTES IN :"),
    ("http_bytes_out", "HTTP BYTES OUT :"),
    ("body_bytes_in", "BODY BYTES IN :"),
    ("body_bytes_out", "BODY BYTES OUT :"),
    ("body_bytes_scanned", "BODY BYTES SCANNED :"),
)


def server_process_fields() -> tuple[FieldSpec, ...]:
    return tuple(FieldSpec(name, label) for name, label in SERVER_PROCESS_LABELS)


def workload_fields(service: str = DEFAULT_SERVICE) -> tuple[FieldSpec, ...]:
    """Workload labels are prefixed with ``Service <name> `` on the statistics page."""
    prefix = f"Service {service_wire_name(service)} "
    counts = tuple(FieldSpec(name, prefix + label) for name, label in WORKLOAD_COUNT_LABELS)
    sizes = tuple(
        FieldSpec(name, prefix + label, FieldUnit.KILOBYTES_AND_BYTES) for name, label in WORKLOAD_BYTE_LABELS
    )
    return counts + sizes


__all__ = [
    "FieldSpec",
    "FieldUnit",
    "KILOBYTE",
    "SERVER_PROCESS_LABELS",
    "WORKLOAD_BYTE_LABELS",
    "WORKLOAD_COUNT_LABELS",
    "server_process_fields",
    "workload_fields",
]
