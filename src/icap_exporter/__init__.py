# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
ICAP exporter package entrypoint.

This package probes an ICAP service over raw TCP, parses the counters printed
on its statistics page, and exposes them as Prometheus gauges alongside a
liveness verdict derived from an OPTIONS probe. Socket I/O lives behind
IcapClient, and all results are modeled as immutable dataclasses.
"""

from .collector import SnapshotCollector
from .config import ExporterSettings, ProbeSettings, load_exporter_settings, load_probe_settings
from .errors import (
    CollectionError,
    ErrorCategory,
    IcapExporterError,
    ProbeCancelled,
    ProbeConnectionError,
    ProbeError,
    ProbeIOError,
)
from .health import HealthEvaluator, parse_status_code
from .icap import IcapClient
from .log import setup_logging
from .models import (
    UNKNOWN_STATUS,
    HealthVerdict,
    MetricsSnapshot,
    ProbeKind,
    ProbeRequest,
    ProbeResponse,
    ServerProcessCounters,
    WorkloadCounters,
)
from .runtime import IcapExporter
from .stats import StatisticsParser
from .version import __version__

__all__ = [
    "CollectionError",
    "ErrorCategory",
    "ExporterSettings",
    "HealthEvaluator",
    "HealthVerdict",
    "IcapClient",
    "IcapExporter",
    "IcapExporterError",
    "MetricsSnapshot",
    "ProbeCancelled",
    "ProbeConnectionError",
    "ProbeError",
    "ProbeIOError",
    "ProbeKind",
    "ProbeRequest",
    "ProbeResponse",
    "ProbeSettings",
    "ServerProcessCounters",
    "SnapshotCollector",
    "StatisticsParser",
    "UNKNOWN_STATUS",
    "WorkloadCounters",
    "load_exporter_settings",
    "load_probe_settings",
    "parse_status_code",
    "setup_logging",
    "__version__",
]
