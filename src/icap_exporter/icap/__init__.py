# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""ICAP wire exports."""

from .client import IcapClient
from .requests import (
    build_http_request,
    build_options_request,
    build_probe_request,
    build_reqmod_request,
    build_work_probe,
    join_host_port,
    service_wire_name,
)

__all__ = [
    "IcapClient",
    "build_http_request",
    "build_options_request",
    "build_probe_request",
    "build_reqmod_request",
    "build_work_probe",
    "join_host_port",
    "service_wire_name",
]
