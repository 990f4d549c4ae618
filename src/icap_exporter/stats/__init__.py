# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Statistics parsing exports."""

from .fields import KILOBYTE, FieldSpec, FieldUnit, server_process_fields, workload_fields
from .parser import (
    StatisticsParser,
    extract_field,
    extract_fields,
    parse_server_process_counters,
    parse_workload_counters,
)

__all__ = [
    "FieldSpec",
    "FieldUnit",
    "KILOBYTE",
    "StatisticsParser",
    "extract_field",
    "extract_fields",
    "parse_server_process_counters",
    "parse_workload_counters",
    "server_process_fields",
    "workload_fields",
]
