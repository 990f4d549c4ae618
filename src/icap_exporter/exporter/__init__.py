# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Prometheus exposition exports."""

from .prometheus import GAUGES, GaugeSpec, IcapCollector, build_registry

__all__ = ["GAUGES", "GaugeSpec", "IcapCollector", "build_registry"]
