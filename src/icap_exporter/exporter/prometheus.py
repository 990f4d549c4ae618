# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Prometheus collector publishing one snapshot per scrape."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector, CollectorRegistry

from ..errors import CollectionError
from ..models import MetricsSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GaugeSpec:
    name: str
    documentation: str
    group: str
    attribute: str

    def value(self, snapshot: MetricsSnapshot) -> float:
        return float(getattr(getattr(snapshot, self.group), self.attribute))


def _server(name: str, documentation: str, attribute: str) -> GaugeSpec:
    return GaugeSpec(f"gw_icap_server_{name}", documentation, "server", attribute)


def _workload(name: str, documentation: str, attribute: str) -> GaugeSpec:
    return GaugeSpec(f"gw_rebuild_{name}", documentation, "workload", attribute)


GAUGES: tuple[GaugeSpec, ...] = (
    _server("children_number", "ICAP Server Children Number", "children"),
    _server("free_servers", "ICAP Server Free Servers Number", "free"),
    _server("used_servers", "ICAP Server Used Servers Number", "used"),
    _server("started_processes", "ICAP Server Started Processes Number", "started"),
    _server("closed_processes", "ICAP Server Closed Processes Number", "closed"),
    _server("crashed_processes", "ICAP Server Crashed Processes Number", "crashed"),
    _server("closing_processes", "ICAP Server Closing Processes Number", "closing"),
    _workload("reqmods", "GW Rebuild REQMODS Number", "reqmods"),
    _workload("respmods", "GW Rebuild RESPMOD Number", "respmods"),
    _workload("options", "GW Rebuild OPTIONS Number", "options"),
    _workload("allow204", "GW Rebuild ALLOW204 Number", "allow204"),
    _workload("requests_scanned", "GW Rebuild Requests Scanned Number", "requests_scanned"),
    _workload("rebuild_failures", "GW Rebuild Rebuilt Failures Number", "rebuild_failures"),
    _workload("rebuild_errors", "GW Rebuild Rebuild Errors Number", "rebuild_errors"),
    _workload("scan_rebuilt", "GW Rebuild Scan Rebuilt Number", "scan_rebuilt"),
    _workload("unprocessed", "GW Rebuild Unprocessed Number", "unprocessed"),
    _workload("unprocessable", "GW Rebuild Unprocessable Number", "unprocessable"),
    _workload("bytes_in", "GW Rebuild Bytes In Number", "bytes_in"),
    _workload("bytes_out", "GW Rebuild Bytes Out Number", "bytes_out"),
    _workload("http_bytes_in", "GW Rebuild HTTP Bytes In Number", "http_bytes_in"),
    _workload("http_bytes_out", "GW Rebuild HTTP Bytes Out Number", "http_bytes_out"),
    _workload("body_bytes_in", "GW Rebuild Body Bytes In Number", "body_bytes_in"),
    _workload("body_bytes_out", "GW Rebuild Body Bytes Out Number", "body_bytes_out"),
    _workload("body_bytes_scanned", "GW Rebuild Body Bytes Scanned Number", "body_bytes_scanned"),
)


class IcapCollector(Collector):
    """
    Custom collector: each scrape triggers exactly one snapshot collection.

    When the collection fails the scrape carries none of these gauges, so a
    stale value is never reported.
    """

    def __init__(self, collect_snapshot: Callable[[], MetricsSnapshot]):
        self._collect_snapshot = collect_snapshot

    def describe(self) -> Iterator[GaugeMetricFamily]:
        for spec in GAUGES:
            yield GaugeMetricFamily(spec.name, spec.documentation)

    def collect(self) -> Iterator[GaugeMetricFamily]:
        logger.debug("Collecting statistics from ICAP service")
        try:
            snapshot = self._collect_snapshot()
        except CollectionError as exc:
            logger.warning("Skipping ICAP gauges for this scrape: %s", exc)
            return
        for spec in GAUGES:
            yield GaugeMetricFamily(spec.name, spec.documentation, value=spec.value(snapshot))


def build_registry(collect_snapshot: Callable[[], MetricsSnapshot]) -> CollectorRegistry:
    """Return a dedicated registry holding only the ICAP collector."""
    registry = CollectorRegistry(auto_describe=True)
    registry.register(IcapCollector(collect_snapshot))
    return registry


__all__ = ["GAUGES", "GaugeSpec", "IcapCollector", "build_registry"]
