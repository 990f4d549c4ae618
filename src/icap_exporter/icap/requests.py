# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
ICAP request serialization.

Two probes are supported:

- ``OPTIONS``: capability discovery, no encapsulated body.
- ``REQMOD``: work simulation. The ICAP head declares ``null-body=<N>`` where N
  is the exact length of the HTTP request header block sent right after it on
  the same connection. N is derived from the serialized HTTP request, so any
  service name or user agent keeps the framing consistent.
"""

from __future__ import annotations

from datetime import datetime, timezone

from ..config import DEFAULT_HTTP_USER_AGENT, DEFAULT_ICAP_USER_AGENT
from ..models import ProbeKind, ProbeRequest

CRLF = "\r\n"
ICAP_VERSION = "ICAP/1.0"

# Day and month names are English independent of the process locale.
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def join_host_port(host: str, port: int | str) -> str:
    """Return ``host:port``, bracketing IPv6 literals."""
    host = str(host)
    if ":" in host and not host.startswith("["):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def service_wire_name(service: str) -> str:
    """Return the service name exactly as it appears in the request line and on the statistics page."""
    return str(service or "").lstrip("/").encode("ascii", errors="replace").decode("ascii")


def _encode(lines: list[str]) -> bytes:
    # Request heads are ASCII on the wire; anything else is replaced rather than raised.
    return (CRLF.join(lines) + CRLF + CRLF).encode("ascii", errors="replace")


def build_options_request(
    host: str,
    port: int | str,
    service: str,
    *,
    user_agent: str = DEFAULT_ICAP_USER_AGENT,
) -> bytes:
    """Serialize an ICAP OPTIONS request carrying no encapsulated message."""
    host_port = join_host_port(host, port)
    return _encode(
        [
            f"OPTIONS icap://{host_port}/{service_wire_name(service)} {ICAP_VERSION}",
            f"Host: {host_port}",
            f"User-Agent: {user_agent}",
            "Encapsulated: null-body=0",
        ]
    )


def format_request_date(moment: datetime) -> str:
    """Render ``moment`` as ``Mon Jan 02 15:04:05 2006`` in UTC; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return (
        f"{_WEEKDAYS[moment.weekday()]} {_MONTHS[moment.month - 1]} {moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d} {moment.year}"
    )


def build_http_request(
    *,
    user_agent: str = DEFAULT_HTTP_USER_AGENT,
    now: datetime | None = None,
) -> bytes:
    """Serialize the minimal HTTP request embedded in a REQMOD probe."""
    return _encode(
        [
            "GET any HTTP/1.0",
            f"Date: {format_request_date(now or datetime.now(timezone.utc))}",
            f"User-Agent: {user_agent}",
        ]
    )


def build_reqmod_request(
    host: str,
    port: int | str,
    service: str,
    *,
    null_body: int,
    user_agent: str = DEFAULT_ICAP_USER_AGENT,
) -> bytes:
    """Serialize the ICAP head of a REQMOD request whose HTTP headers end at ``null_body``."""
    if null_body < 0:
        raise ValueError("null_body offset must be non-negative")
    host_port = join_host_port(host, port)
    return _encode(
        [
            f"REQMOD icap://{host_port}/{service_wire_name(service)} {ICAP_VERSION}",
            f"Host: {host_port}",
            f"User-Agent: {user_agent}",
            f"Encapsulated: req-hdr=0, null-body={null_body}",
        ]
    )


def build_work_probe(
    host: str,
    port: int | str,
    service: str,
    *,
    icap_user_agent: str = DEFAULT_ICAP_USER_AGENT,
    http_user_agent: str = DEFAULT_HTTP_USER_AGENT,
    now: datetime | None = None,
) -> bytes:
    """Serialize the REQMOD head immediately followed by its HTTP request."""
    http_request = build_http_request(user_agent=http_user_agent, now=now)
    icap_head = build_reqmod_request(
        host,
        port,
        service,
        null_body=len(http_request),
        user_agent=icap_user_agent,
    )
    return icap_head + http_request


def build_probe_request(
    kind: ProbeKind,
    host: str,
    port: int,
    service: str,
    *,
    icap_user_agent: str = DEFAULT_ICAP_USER_AGENT,
    http_user_agent: str = DEFAULT_HTTP_USER_AGENT,
    now: datetime | None = None,
) -> ProbeRequest:
    if kind is ProbeKind.CAPABILITY:
        payload = build_options_request(host, port, service, user_agent=icap_user_agent)
    elif kind is ProbeKind.WORK_SIMULATION:
        payload = build_work_probe(
            host,
            port,
            service,
            icap_user_agent=icap_user_agent,
            http_user_agent=http_user_agent,
            now=now,
        )
    else:  # pragma: no cover - enum is closed
        raise ValueError(f"Unsupported probe kind: {kind!r}")
    return ProbeRequest(kind=kind, host=host, port=int(port), service=service, payload=payload)


__all__ = [
    "ICAP_VERSION",
    "build_http_request",
    "build_options_request",
    "build_probe_request",
    "build_reqmod_request",
    "build_work_probe",
    "format_request_date",
    "join_host_port",
    "service_wire_name",
]
