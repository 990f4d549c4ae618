# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for the ICAP exporter."""

from .counters import (
    UNKNOWN_STATUS,
    HealthVerdict,
    MetricsSnapshot,
    ServerProcessCounters,
    WorkloadCounters,
)
from .probe import ProbeKind, ProbeRequest, ProbeResponse

__all__ = [
    "HealthVerdict",
    "MetricsSnapshot",
    "ProbeKind",
    "ProbeRequest",
    "ProbeResponse",
    "ServerProcessCounters",
    "UNKNOWN_STATUS",
    "WorkloadCounters",
]
