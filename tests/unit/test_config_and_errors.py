# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket

from icap_exporter import config
from icap_exporter.config import DEFAULT_ICAP_USER_AGENT
from icap_exporter.errors import (
    ErrorCategory,
    ProbeConnectionError,
    ProbeIOError,
    categorize_exception,
    error_category_to_reason,
)


def test_exporter_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("ICAP_HOST", "icap.internal")
    monkeypatch.setenv("ICAP_PORT", "11344")
    monkeypatch.setenv("SERVICE", "avscan")
    monkeypatch.setenv("METRICS_HOST", "127.0.0.1")
    monkeypatch.setenv("METRICS_PORT", "9200")
    monkeypatch.setenv("ICAP_CONNECT_TIMEOUT", "1.5")
    monkeypatch.setenv("ICAP_READ_TIMEOUT", "3")
    monkeypatch.setenv("ICAP_USER_AGENT", "probe/2")
    monkeypatch.setenv("ICAP_HTTP_USER_AGENT", "probe-http/2")
    monkeypatch.setenv("ICAP_MAX_RESPONSE_BYTES", "2048")

    settings = config.load_exporter_settings()

    assert settings.icap_host == "icap.internal"
    assert settings.icap_port == 11344
    assert settings.service == "avscan"
    assert settings.listen_host == "127.0.0.1"
    assert settings.metrics_port == 9200
    assert settings.probe.connect_timeout == 1.5
    assert settings.probe.read_timeout == 3.0
    assert settings.probe.icap_user_agent == "probe/2"
    assert settings.probe.http_user_agent == "probe-http/2"
    assert settings.probe.max_response_bytes == 2048


def test_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("ICAP_PORT", "icap")
    monkeypatch.setenv("ICAP_CONNECT_TIMEOUT", "soon")
    monkeypatch.setenv("ICAP_READ_TIMEOUT", "-4")
    monkeypatch.setenv("ICAP_MAX_RESPONSE_BYTES", "0")
    monkeypatch.setenv("SERVICE", "   ")
    monkeypatch.setenv("ICAP_USER_AGENT", "")

    settings = config.load_exporter_settings()

    assert settings.icap_port == config.ExporterSettings.icap_port
    assert settings.service == config.DEFAULT_SERVICE
    assert settings.probe.connect_timeout == config.ProbeSettings.connect_timeout
    assert settings.probe.read_timeout == config.ProbeSettings.read_timeout
    assert settings.probe.max_response_bytes == config.ProbeSettings.max_response_bytes
    assert settings.probe.icap_user_agent == DEFAULT_ICAP_USER_AGENT


def test_load_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("ICAP_READ_TIMEOUT", "7.5")
    assert config.load_probe_settings().read_timeout == 7.5
    monkeypatch.setenv("ICAP_READ_TIMEOUT", "8.5")
    assert config.load_probe_settings().read_timeout == 8.5


def test_categorize_exception_variants():
    assert categorize_exception(socket.timeout("slow")) is ErrorCategory.TIMEOUT
    assert categorize_exception(socket.gaierror("dns")) is ErrorCategory.DNS_ERROR
    assert categorize_exception(ConnectionRefusedError()) is ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(BrokenPipeError()) is ErrorCategory.IO_ERROR
    assert categorize_exception(ValueError("x")) is ErrorCategory.UNKNOWN_ERROR
    assert categorize_exception(ProbeIOError("slow", category=ErrorCategory.TIMEOUT)) is ErrorCategory.TIMEOUT


def test_probe_errors_carry_default_categories():
    assert ProbeConnectionError("x").category is ErrorCategory.CONNECTION_ERROR
    assert ProbeIOError("x").category is ErrorCategory.IO_ERROR


def test_error_category_to_reason():
    assert error_category_to_reason(ErrorCategory.NONE) == ""
    assert error_category_to_reason(None) == ""
    assert "resolved" in error_category_to_reason(ErrorCategory.DNS_ERROR)
