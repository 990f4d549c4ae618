# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Liveness verdict derived from an ICAP OPTIONS probe."""

from __future__ import annotations

import logging
import re
import threading

from .config import DEFAULT_SERVICE
from .errors import ErrorCategory, ProbeError, error_category_to_reason
from .icap.client import IcapClient
from .models import UNKNOWN_STATUS, HealthVerdict

logger = logging.getLogger(__name__)

HEALTHY_STATUS = 200
STATUS_LINE_RE = re.compile(rb"\s*ICAP/\d+\.\d+\s+(\d{1,3})(?!\d)")


def parse_status_code(raw: bytes | bytearray | None) -> int:
    """Return the status code from the ICAP status line, or UNKNOWN_STATUS."""
    if not raw:
        return UNKNOWN_STATUS
    match = STATUS_LINE_RE.match(bytes(raw))
    if match is None:
        return UNKNOWN_STATUS
    return int(match.group(1))


class HealthEvaluator:
    def __init__(self, client: IcapClient, service: str = DEFAULT_SERVICE):
        self.client = client
        self.service = service

    def evaluate(
        self,
        host: str,
        port: int,
        *,
        cancel: threading.Event | None = None,
    ) -> HealthVerdict:
        try:
            response = self.client.probe_capability(host, port, self.service, cancel=cancel)
        except ProbeError as exc:
            logger.warning("ICAP health probe to %s:%s failed: %s", host, port, exc)
            return HealthVerdict(alive=False, error=str(exc), error_category=exc.category)

        if response.empty:
            return HealthVerdict(
                alive=False,
                error=error_category_to_reason(ErrorCategory.EMPTY_RESPONSE),
                error_category=ErrorCategory.EMPTY_RESPONSE,
            )

        code = parse_status_code(response.raw)
        if code != HEALTHY_STATUS:
            logger.info("ICAP service at %s:%s answered OPTIONS with status %s", host, port, code)
        return HealthVerdict(alive=code == HEALTHY_STATUS, status_code=code)


__all__ = ["HEALTHY_STATUS", "HealthEvaluator", "parse_status_code"]
