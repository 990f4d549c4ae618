# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Counter, verdict, and snapshot value types."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..errors import ErrorCategory

UNKNOWN_STATUS = -1


@dataclass(frozen=True)
class ServerProcessCounters:
    """Worker-process pool statistics of the ICAP server."""

    children: int = 0
    free: int = 0
    used: int = 0
    started: int = 0
    closed: int = 0
    crashed: int = 0
    closing: int = 0


@dataclass(frozen=True)
class WorkloadCounters:
    """Per-service statistics; byte fields are already combined into plain bytes."""

    reqmods: int = 0
    respmods: int = 0
    options: int = 0
    allow204: int = 0
    requests_scanned: int = 0
    rebuild_failures: int = 0
    rebuild_errors: int = 0
    scan_rebuilt: int = 0
    unprocessed: int = 0
    unprocessable: int = 0
    bytes_in: int = 0
    bytes_out: int = 0
    http_bytes_in: int = 0
    http_bytes_out: int = 0
    body_bytes_in: int = 0
    body_bytes_out: int = 0
    body_bytes_scanned: int = 0


@dataclass(frozen=True)
class HealthVerdict:
    alive: bool
    status_code: int = UNKNOWN_STATUS
    error: str | None = None
    error_category: ErrorCategory = ErrorCategory.NONE


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MetricsSnapshot:
    """
    Counters obtained from one work-simulation probe.

    ``collected_at`` is excluded from equality: two snapshots parsed from the
    same response bytes compare equal regardless of when they were taken.
    """

    server: ServerProcessCounters = field(default_factory=ServerProcessCounters)
    workload: WorkloadCounters = field(default_factory=WorkloadCounters)
    status_code: int = UNKNOWN_STATUS
    collected_at: datetime = field(default_factory=_utcnow, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "server": asdict(self.server),
            "workload": asdict(self.workload),
            "status_code": self.status_code,
            "collected_at": self.collected_at.isoformat(),
        }
