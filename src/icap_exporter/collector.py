# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-cycle metrics snapshot assembly."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone

from .errors import CollectionError, ErrorCategory, ProbeError
from .health import parse_status_code
from .icap.client import IcapClient
from .models import MetricsSnapshot
from .stats import StatisticsParser

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotCollector:
    """
    Runs one REQMOD probe per call and parses its statistics.

    Counters are parsed whatever status code the service returns. A transport
    failure produces no snapshot at all; nothing from a previous cycle is
    reused.
    """

    def __init__(
        self,
        client: IcapClient,
        parser: StatisticsParser | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.client = client
        self.parser = parser or StatisticsParser()
        self._clock = clock

    def _parser_for(self, service: str) -> StatisticsParser:
        if service == self.parser.service:
            return self.parser
        return StatisticsParser(service)

    def collect(
        self,
        host: str,
        port: int,
        service: str,
        *,
        cancel: threading.Event | None = None,
    ) -> MetricsSnapshot:
        try:
            response = self.client.probe_work(host, port, service, cancel=cancel)
        except ProbeError as exc:
            logger.warning("Collecting statistics from %s:%s failed: %s", host, port, exc)
            raise CollectionError(f"statistics probe failed: {exc}", category=exc.category) from exc
        if response.empty:
            raise CollectionError(
                f"statistics probe to {host}:{port} returned no bytes",
                category=ErrorCategory.EMPTY_RESPONSE,
            )

        parser = self._parser_for(service)
        text = response.text
        return MetricsSnapshot(
            server=parser.parse_server_process_counters(text),
            workload=parser.parse_workload_counters(text),
            status_code=parse_status_code(response.raw),
            collected_at=self._clock(),
        )


__all__ = ["SnapshotCollector"]
