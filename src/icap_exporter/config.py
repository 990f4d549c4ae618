# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for the ICAP exporter."""

import os
from dataclasses import dataclass, field

DEFAULT_ICAP_USER_AGENT = "C-ICAP-Client-Library/0.5.6"
DEFAULT_HTTP_USER_AGENT = "C-ICAP-Client/x.xx"
DEFAULT_SERVICE = "gw_rebuild"
DEFAULT_ICAP_PORT = 1344


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _positive_float_env(name: str, default: float) -> float:
    value = _float_env(name, default)
    return value if value > 0 else default


def _str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(frozen=True)
class ProbeSettings:
    """Per-probe socket and request defaults."""

    connect_timeout: float = 5.0
    read_timeout: float = 10.0
    icap_user_agent: str = DEFAULT_ICAP_USER_AGENT
    http_user_agent: str = DEFAULT_HTTP_USER_AGENT
    read_chunk_size: int = 4096
    max_response_bytes: int = 1024 * 1024
    cancel_poll_interval: float = 0.25

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_response_bytes = _int_env("ICAP_MAX_RESPONSE_BYTES", cls.max_response_bytes)
        if max_response_bytes <= 0:
            max_response_bytes = cls.max_response_bytes
        return cls(
            connect_timeout=_positive_float_env("ICAP_CONNECT_TIMEOUT", cls.connect_timeout),
            read_timeout=_positive_float_env("ICAP_READ_TIMEOUT", cls.read_timeout),
            icap_user_agent=_str_env("ICAP_USER_AGENT", cls.icap_user_agent),
            http_user_agent=_str_env("ICAP_HTTP_USER_AGENT", cls.http_user_agent),
            max_response_bytes=max_response_bytes,
        )


@dataclass(frozen=True)
class ExporterSettings:
    """Target ICAP instance and exporter listener settings."""

    icap_host: str = "127.0.0.1"
    icap_port: int = DEFAULT_ICAP_PORT
    service: str = DEFAULT_SERVICE
    listen_host: str = "0.0.0.0"
    metrics_port: int = 9101
    probe: ProbeSettings = field(default_factory=ProbeSettings)

    @classmethod
    def from_env(cls) -> "ExporterSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            icap_host=_str_env("ICAP_HOST", cls.icap_host),
            icap_port=_int_env("ICAP_PORT", cls.icap_port),
            service=_str_env("SERVICE", cls.service),
            listen_host=_str_env("METRICS_HOST", cls.listen_host),
            metrics_port=_int_env("METRICS_PORT", cls.metrics_port),
            probe=ProbeSettings.from_env(),
        )


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()


def load_exporter_settings() -> ExporterSettings:
    """Load exporter settings from environment with sensible defaults."""
    return ExporterSettings.from_env()
