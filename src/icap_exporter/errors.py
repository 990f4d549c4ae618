# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
from enum import Enum


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    IO_ERROR = "IO_ERROR"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    CANCELLED = "CANCELLED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class IcapExporterError(Exception):
    """Base class for all exporter errors."""


class ProbeError(IcapExporterError):
    """Transport-level failure of a single ICAP probe."""

    default_category = ErrorCategory.UNKNOWN_ERROR

    def __init__(self, message: str, *, category: ErrorCategory | None = None):
        super().__init__(message)
        self.category = category or self.default_category


class ProbeConnectionError(ProbeError):
    """Address resolution or TCP connect failed."""

    default_category = ErrorCategory.CONNECTION_ERROR


class ProbeIOError(ProbeError):
    """Write or read failed part-way through a probe, including short writes."""

    default_category = ErrorCategory.IO_ERROR


class ProbeCancelled(ProbeError):
    """The caller cancelled an in-flight probe."""

    default_category = ErrorCategory.CANCELLED


class CollectionError(IcapExporterError):
    """No snapshot could be produced for this collection cycle."""

    def __init__(self, message: str, *, category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR):
        super().__init__(message)
        self.category = category


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """Map socket/OS exceptions raised during a probe to an ErrorCategory."""
    if isinstance(exc, ProbeError):
        return exc.category

    if isinstance(exc, (socket.timeout, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ConnectionRefusedError, ConnectionResetError, ConnectionAbortedError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, OSError):
        return ErrorCategory.IO_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "ICAP service did not answer in time",
        ErrorCategory.CONNECTION_ERROR: "ICAP service refused or dropped the connection",
        ErrorCategory.DNS_ERROR: "ICAP host could not be resolved",
        ErrorCategory.IO_ERROR: "I/O failure while talking to the ICAP service",
        ErrorCategory.EMPTY_RESPONSE: "ICAP service returned an empty response",
        ErrorCategory.CANCELLED: "Probe cancelled",
        ErrorCategory.UNKNOWN_ERROR: "Probe failed",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Probe failed")


__all__ = [
    "CollectionError",
    "ErrorCategory",
    "IcapExporterError",
    "ProbeCancelled",
    "ProbeConnectionError",
    "ProbeError",
    "ProbeIOError",
    "categorize_exception",
    "error_category_to_reason",
]
