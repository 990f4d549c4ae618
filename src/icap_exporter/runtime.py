# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade wiring the ICAP client, parser, health evaluator, and collector."""

from __future__ import annotations

import threading

from prometheus_client.registry import CollectorRegistry

from .collector import SnapshotCollector
from .config import ExporterSettings, load_exporter_settings
from .exporter.prometheus import build_registry
from .health import HealthEvaluator
from .icap.client import IcapClient
from .models import HealthVerdict, MetricsSnapshot
from .stats import StatisticsParser


class IcapExporter:
    """
    Convenience wrapper bound to one configured ICAP instance.

    The client holds no connection state, so a single instance can serve
    concurrent scrapes and health checks; every call opens its own socket.
    """

    def __init__(self, settings: ExporterSettings | None = None, *, client: IcapClient | None = None):
        self.settings = settings or load_exporter_settings()
        self.client = client or IcapClient(self.settings.probe)
        self.parser = StatisticsParser(self.settings.service)
        self.health_evaluator = HealthEvaluator(self.client, self.settings.service)
        self.snapshot_collector = SnapshotCollector(self.client, self.parser)

    @property
    def target(self) -> str:
        return f"{self.settings.icap_host}:{self.settings.icap_port}/{self.settings.service}"

    def check_health(self, *, cancel: threading.Event | None = None) -> HealthVerdict:
        return self.health_evaluator.evaluate(self.settings.icap_host, self.settings.icap_port, cancel=cancel)

    def collect(self, *, cancel: threading.Event | None = None) -> MetricsSnapshot:
        return self.snapshot_collector.collect(
            self.settings.icap_host,
            self.settings.icap_port,
            self.settings.service,
            cancel=cancel,
        )

    def build_registry(self) -> CollectorRegistry:
        return build_registry(self.collect)


__all__ = ["IcapExporter"]
