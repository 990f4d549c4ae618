# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import random
from dataclasses import asdict

import pytest
from icap_samples import EXPECTED_SERVER, EXPECTED_WORKLOAD, STAT_LINES, statistics_response

from icap_exporter.models import ServerProcessCounters, WorkloadCounters
from icap_exporter.stats import (
    KILOBYTE,
    FieldSpec,
    FieldUnit,
    StatisticsParser,
    extract_field,
    parse_server_process_counters,
    parse_workload_counters,
    server_process_fields,
    workload_fields,
)


def test_parses_every_field_exactly():
    raw = statistics_response()
    assert asdict(parse_server_process_counters(raw)) == EXPECTED_SERVER
    assert asdict(parse_workload_counters(raw)) == EXPECTED_WORKLOAD


@pytest.mark.parametrize("seed", [0, 1, 7, 42, 1337])
def test_field_order_does_not_matter(seed):
    lines = [line for _, _, line, _ in STAT_LINES]
    random.Random(seed).shuffle(lines)
    raw = statistics_response(lines)
    assert asdict(parse_server_process_counters(raw)) == EXPECTED_SERVER
    assert asdict(parse_workload_counters(raw)) == EXPECTED_WORKLOAD


@pytest.mark.parametrize("missing", [name for _, name, _, _ in STAT_LINES])
def test_missing_field_only_zeroes_itself(missing):
    lines = [line for _, name, line, _ in STAT_LINES if name != missing]
    raw = statistics_response(lines)

    combined = {**asdict(parse_server_process_counters(raw)), **asdict(parse_workload_counters(raw))}
    expected = {**EXPECTED_SERVER, **EXPECTED_WORKLOAD, missing: 0}
    assert combined == expected


def test_malformed_values_default_to_zero():
    raw = (
        b"ICAP/1.0 200 OK\r\n\r\n"
        b"Children number: lots\n"
        b"Free Servers: 4\n"
        b"Service gw_rebuild REQMODS : -\n"
        b"Service gw_rebuild RESPMODS : 9\n"
        b"Service gw_rebuild BYTES IN : many Kbs 3 bytes\n"
        b"Service gw_rebuild BYTES OUT : 1 Kbs 2 bytes\n"
    )
    server = parse_server_process_counters(raw)
    workload = parse_workload_counters(raw)
    assert server.children == 0
    assert server.free == 4
    assert workload.reqmods == 0
    assert workload.respmods == 9
    assert workload.bytes_in == 0
    assert workload.bytes_out == 1 * KILOBYTE + 2


def test_partial_size_field_defaults_to_zero():
    raw = "Service gw_rebuild BYTES IN : 5 Kbs  bytes"
    spec = FieldSpec("bytes_in", "Service gw_rebuild BYTES IN :", FieldUnit.KILOBYTES_AND_BYTES)
    assert extract_field(raw, spec) == 0


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Service gw_rebuild BYTES IN : 2 Kbs 100 bytes", 2148),
        ("Service gw_rebuild BYTES IN : 0 Kbs 7 bytes", 7),
        ("Service gw_rebuild BYTES IN : 1 Kbs 0 bytes", 1024),
    ],
)
def test_kilobyte_combination_uses_binary_kilobytes(text, expected):
    # 1024 is an assumption about the "Kbs" unit printed by the service.
    assert KILOBYTE == 1024
    assert parse_workload_counters(text).bytes_in == expected


def test_byte_labels_do_not_bleed_into_each_other():
    raw = "Service gw_rebuild HTTP BYTES IN : 3 Kbs 1 bytes\nService gw_rebuild BODY BYTES IN : 4 Kbs 2 bytes\n"
    workload = parse_workload_counters(raw)
    assert workload.bytes_in == 0
    assert workload.http_bytes_in == 3 * 1024 + 1
    assert workload.body_bytes_in == 4 * 1024 + 2


def test_first_occurrence_wins():
    raw = "Children number: 2\nChildren number: 9\n"
    assert parse_server_process_counters(raw).children == 2


@pytest.mark.parametrize("raw", [b"", None, "", b"\x00\xff\xfe garbage", "ICAP/1.0 500 Server Error\r\n\r\n"])
def test_empty_or_garbage_input_never_raises(raw):
    assert parse_server_process_counters(raw) == ServerProcessCounters()
    assert parse_workload_counters(raw) == WorkloadCounters()


def test_parser_follows_configured_service_name():
    raw = "Service avscan REQMODS : 5\nService gw_rebuild REQMODS : 8\n"
    assert StatisticsParser("avscan").parse_workload_counters(raw).reqmods == 5
    assert parse_workload_counters(raw, service="avscan").reqmods == 5
    assert parse_workload_counters(raw).reqmods == 8


def test_service_name_labels_use_request_line_form():
    raw = "Service caf? REQMODS : 5\nService caf? BYTES IN : 2 Kbs 3 bytes\nService avscan REQMODS : 9\n"
    counters = StatisticsParser("caf\u00e9").parse_workload_counters(raw)
    assert counters.reqmods == 5
    assert counters.bytes_in == 2 * KILOBYTE + 3
    assert parse_workload_counters(raw, service="/avscan").reqmods == 9


def test_field_tables_cover_every_counter():
    server_names = {spec.name for spec in server_process_fields()}
    workload_specs = workload_fields("gw_rebuild")
    assert server_names == set(asdict(ServerProcessCounters()))
    assert {spec.name for spec in workload_specs} == set(asdict(WorkloadCounters()))
    sized = {spec.name for spec in workload_specs if spec.unit is FieldUnit.KILOBYTES_AND_BYTES}
    assert sized == {
        "bytes_in",
        "bytes_out",
        "http_bytes_in",
        "http_bytes_out",
        "body_bytes_in",
        "body_bytes_out",
        "body_bytes_scanned",
    }
    assert all(spec.label.startswith("Service gw_rebuild ") for spec in workload_specs)
