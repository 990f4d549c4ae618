# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import socket
import threading

import pytest

from icap_exporter.config import ExporterSettings, ProbeSettings


class FakeIcapServer:
    """
    Loopback ICAP stand-in.

    Reads each request until the client half-closes, records it, then answers
    with the canned bytes registered for the request method. With ``hang=True``
    it keeps the connection open without answering until stopped.
    """

    def __init__(self):
        self.responses: dict[str, bytes] = {}
        self.requests: list[bytes] = []
        self.hang = False
        self._release = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(8)
        self._sock.settimeout(0.2)
        self.host, self.port = self._sock.getsockname()
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while not self._stopped.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn:
            conn.settimeout(5)
            data = bytearray()
            try:
                while True:
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    data.extend(chunk)
            except OSError:
                return
            self.requests.append(bytes(data))
            if self.hang:
                self._release.wait(10)
                return
            method = bytes(data).split(b" ", 1)[0].decode("ascii", errors="replace")
            reply = self.responses.get(method, b"")
            if reply:
                try:
                    conn.sendall(reply)
                except OSError:
                    return

    def stop(self) -> None:
        self._stopped.set()
        self._release.set()
        self._sock.close()
        self._thread.join(timeout=2)


@pytest.fixture
def icap_server():
    server = FakeIcapServer()
    try:
        yield server
    finally:
        server.stop()


@pytest.fixture
def closed_port():
    """A loopback port with no listener; connecting to it is refused."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def fast_probe_settings():
    return ProbeSettings(connect_timeout=1.0, read_timeout=2.0, cancel_poll_interval=0.05)


@pytest.fixture
def exporter_settings(icap_server, fast_probe_settings):
    return ExporterSettings(
        icap_host=icap_server.host,
        icap_port=icap_server.port,
        service="gw_rebuild",
        probe=fast_probe_settings,
    )


@pytest.fixture(autouse=True)
def _restore_package_log_level():
    package_logger = logging.getLogger("icap_exporter")
    previous = package_logger.level
    yield
    package_logger.setLevel(previous)
