# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Blocking one-shot ICAP client over a dedicated TCP connection."""

from __future__ import annotations

import logging
import socket
import threading
import time
from collections.abc import Callable
from datetime import datetime

from ..config import DEFAULT_SERVICE, ProbeSettings, load_probe_settings
from ..errors import (
    ErrorCategory,
    ProbeCancelled,
    ProbeConnectionError,
    ProbeIOError,
    categorize_exception,
)
from ..models import ProbeKind, ProbeRequest, ProbeResponse
from .requests import build_probe_request, join_host_port

logger = logging.getLogger(__name__)

Connector = Callable[..., socket.socket]


class IcapClient:
    """
    Issues a single ICAP probe per call.

    Each call opens its own connection, writes the whole request, half-closes
    the write side and reads until the server closes. There are no retries and
    no pooling; both are left to callers.
    """

    def __init__(
        self,
        settings: ProbeSettings | None = None,
        *,
        connector: Connector = socket.create_connection,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings or load_probe_settings()
        self._connector = connector
        self._clock = clock

    def probe_capability(
        self,
        host: str,
        port: int,
        service: str = DEFAULT_SERVICE,
        *,
        cancel: threading.Event | None = None,
    ) -> ProbeResponse:
        """Send an OPTIONS request and return the raw response."""
        request = build_probe_request(
            ProbeKind.CAPABILITY,
            host,
            port,
            service,
            icap_user_agent=self.settings.icap_user_agent,
        )
        return self.send(request, cancel=cancel)

    def probe_work(
        self,
        host: str,
        port: int,
        service: str = DEFAULT_SERVICE,
        *,
        cancel: threading.Event | None = None,
    ) -> ProbeResponse:
        """Send a REQMOD request with an embedded HTTP request and return the raw response."""
        request = build_probe_request(
            ProbeKind.WORK_SIMULATION,
            host,
            port,
            service,
            icap_user_agent=self.settings.icap_user_agent,
            http_user_agent=self.settings.http_user_agent,
            now=self._clock() if self._clock else None,
        )
        return self.send(request, cancel=cancel)

    def send(self, request: ProbeRequest, *, cancel: threading.Event | None = None) -> ProbeResponse:
        target = join_host_port(request.host, request.port)
        started = time.monotonic()
        logger.debug("Sending %s probe to %s (%d bytes)", request.kind.value, target, request.length)

        _raise_if_cancelled(cancel, target)
        sock = self._connect(request, target)
        try:
            self._write(sock, request, target)
            try:
                sock.shutdown(socket.SHUT_WR)
            except OSError as exc:
                raise ProbeIOError(
                    f"failed to close write side towards {target}: {exc}",
                    category=categorize_exception(exc),
                ) from exc
            raw = self._read(sock, target, cancel)
        finally:
            sock.close()

        elapsed = time.monotonic() - started
        logger.debug("Read %d bytes from %s in %.3fs", len(raw), target, elapsed)
        return ProbeResponse(kind=request.kind, raw=raw, elapsed=elapsed)

    def _connect(self, request: ProbeRequest, target: str) -> socket.socket:
        try:
            return self._connector((request.host, request.port), timeout=self.settings.connect_timeout)
        except socket.gaierror as exc:
            raise ProbeConnectionError(f"cannot resolve {target}: {exc}", category=ErrorCategory.DNS_ERROR) from exc
        except ValueError as exc:
            # UnicodeError (IDNA label limits) and embedded NULs surface before any lookup.
            raise ProbeConnectionError(f"cannot resolve {target}: {exc}", category=ErrorCategory.DNS_ERROR) from exc
        except TimeoutError as exc:
            raise ProbeConnectionError(
                f"connect to {target} timed out after {self.settings.connect_timeout}s",
                category=ErrorCategory.TIMEOUT,
            ) from exc
        except OSError as exc:
            raise ProbeConnectionError(
                f"cannot connect to {target}: {exc}",
                category=ErrorCategory.CONNECTION_ERROR,
            ) from exc

    def _write(self, sock: socket.socket, request: ProbeRequest, target: str) -> None:
        payload = memoryview(request.payload)
        written = 0
        sock.settimeout(self.settings.read_timeout)
        try:
            while written < len(payload):
                sent = sock.send(payload[written:])
                if sent <= 0:
                    break
                written += sent
        except OSError as exc:
            raise ProbeIOError(
                f"failed to write {request.kind.value} request to {target}: {exc}",
                category=categorize_exception(exc),
            ) from exc

        if written != request.length:
            raise ProbeIOError(f"partial write of {request.kind.value} request to {target}: {written}/{request.length} bytes")

    def _read(self, sock: socket.socket, target: str, cancel: threading.Event | None) -> bytes:
        deadline = time.monotonic() + self.settings.read_timeout
        chunk_size = max(1, self.settings.read_chunk_size)
        limit = self.settings.max_response_bytes
        content = bytearray()

        while True:
            _raise_if_cancelled(cancel, target)
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ProbeIOError(
                    f"no complete response from {target} within {self.settings.read_timeout}s",
                    category=ErrorCategory.TIMEOUT,
                )
            wait = remaining if cancel is None else min(remaining, self.settings.cancel_poll_interval)
            sock.settimeout(wait)
            try:
                chunk = sock.recv(chunk_size)
            except TimeoutError:
                continue
            except OSError as exc:
                raise ProbeIOError(
                    f"failed to read response from {target}: {exc}",
                    category=categorize_exception(exc),
                ) from exc

            if not chunk:
                return bytes(content)
            content.extend(chunk)
            if limit > 0 and len(content) >= limit:
                logger.warning("Response from %s truncated at %d bytes", target, limit)
                return bytes(content[:limit])


def _raise_if_cancelled(cancel: threading.Event | None, target: str) -> None:
    if cancel is not None and cancel.is_set():
        raise ProbeCancelled(f"probe to {target} cancelled")


__all__ = ["IcapClient"]
