# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Statistics page parser.

Every counter is looked up on its own: the first occurrence of its label is
located and the integer that follows is extracted. A label that is missing or
followed by something that is not a number yields 0 for that counter only;
parsing never raises on malformed input.
"""

from __future__ import annotations

import logging

from ..config import DEFAULT_SERVICE
from ..models import ServerProcessCounters, WorkloadCounters
from .fields import KILOBYTE, FieldSpec, FieldUnit, server_process_fields, workload_fields

logger = logging.getLogger(__name__)

RawResponse = bytes | bytearray | str | None


def _as_text(raw: RawResponse) -> str:
    if raw is None:
        return ""
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("latin-1")
    return str(raw)


def _to_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def extract_field(text: str, spec: FieldSpec) -> int:
    """Return the value for ``spec`` in ``text``, or 0 when it cannot be located or converted."""
    match = spec.pattern.search(text)
    if match is None:
        logger.debug("Field %s not found (label %r)", spec.name, spec.label)
        return 0

    if spec.unit is FieldUnit.KILOBYTES_AND_BYTES:
        kilobytes = _to_int(match.group(1))
        residual = _to_int(match.group(2))
        if kilobytes is None or residual is None:
            logger.debug("Field %s has unparsable size %r", spec.name, match.group(0))
            return 0
        return kilobytes * KILOBYTE + residual

    value = _to_int(match.group(1))
    if value is None:
        logger.debug("Field %s has unparsable value %r", spec.name, match.group(0))
        return 0
    return value


def extract_fields(raw: RawResponse, fields: tuple[FieldSpec, ...]) -> dict[str, int]:
    text = _as_text(raw)
    return {spec.name: extract_field(text, spec) for spec in fields}


class StatisticsParser:
    """Parses both counter groups; field tables are built once per service name."""

    def __init__(self, service: str = DEFAULT_SERVICE):
        self.service = service
        self.server_fields = server_process_fields()
        self.workload_fields = workload_fields(service)

    def parse_server_process_counters(self, raw: RawResponse) -> ServerProcessCounters:
        return ServerProcessCounters(**extract_fields(raw, self.server_fields))

    def parse_workload_counters(self, raw: RawResponse) -> WorkloadCounters:
        return WorkloadCounters(**extract_fields(raw, self.workload_fields))


_DEFAULT_PARSER = StatisticsParser()


def parse_server_process_counters(raw: RawResponse) -> ServerProcessCounters:
    return _DEFAULT_PARSER.parse_server_process_counters(raw)


def parse_workload_counters(raw: RawResponse, service: str = DEFAULT_SERVICE) -> WorkloadCounters:
    parser = _DEFAULT_PARSER if service == _DEFAULT_PARSER.service else StatisticsParser(service)
    return parser.parse_workload_counters(raw)


__all__ = [
    "StatisticsParser",
    "extract_field",
    "extract_fields",
    "parse_server_process_counters",
    "parse_workload_counters",
]
