# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""ICAP exporter CLI."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from typing import Any

import httpx

from ..config import ExporterSettings, load_exporter_settings
from ..errors import CollectionError, error_category_to_reason
from ..log import server_log_level, setup_logging
from ..models import HealthVerdict, MetricsSnapshot
from ..runtime import IcapExporter

logger = logging.getLogger(__name__)

HEALTHCHECK_TIMEOUT = 5.0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prometheus exporter and probe tool for ICAP services")
    parser.add_argument("--host", help="ICAP host (default: $ICAP_HOST)")
    parser.add_argument("--port", type=int, help="ICAP port (default: $ICAP_PORT)")
    parser.add_argument("--service", help="ICAP service name (default: $SERVICE)")
    parser.add_argument("--log-level", help="Logging level (default: $ICAP_EXPORTER_LOG_LEVEL)")

    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Serve /metrics and /health endpoints")
    serve.add_argument("--listen-host", help="Listener address (default: $METRICS_HOST)")
    serve.add_argument("--metrics-port", type=int, help="Listener port (default: $METRICS_PORT)")

    collect = sub.add_parser("collect", help="Probe once and print the counters")
    collect.add_argument("--json", action="store_true", help="Output JSON instead of a summary")

    health = sub.add_parser("health", help="Probe once with OPTIONS and report liveness")
    health.add_argument("--json", action="store_true", help="Output JSON instead of a summary")

    healthcheck = sub.add_parser("healthcheck", help="Query a running exporter's /health/live endpoint")
    healthcheck.add_argument("--url", help="Endpoint URL (default: http://127.0.0.1:$METRICS_PORT/health/live)")
    return parser


def _apply_overrides(settings: ExporterSettings, args: argparse.Namespace) -> ExporterSettings:
    overrides: dict[str, Any] = {}
    if args.host:
        overrides["icap_host"] = args.host
    if args.port:
        overrides["icap_port"] = args.port
    if args.service:
        overrides["service"] = args.service
    if getattr(args, "listen_host", None):
        overrides["listen_host"] = args.listen_host
    if getattr(args, "metrics_port", None):
        overrides["metrics_port"] = args.metrics_port
    return dataclasses.replace(settings, **overrides) if overrides else settings


def _print_json(data: dict[str, Any]) -> None:
    json.dump(data, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _print_snapshot(snapshot: MetricsSnapshot, target: str) -> None:
    payload = snapshot.to_dict()
    print(f"[icap-exporter] {target} status={snapshot.status_code} at {payload['collected_at']}")
    for group in ("server", "workload"):
        print(f"{group}:")
        for key, value in payload[group].items():
            print(f"  {key}: {value}")


def _verdict_dict(verdict: HealthVerdict) -> dict[str, Any]:
    return {
        "alive": verdict.alive,
        "status_code": verdict.status_code,
        "error": verdict.error,
        "error_category": verdict.error_category.value,
    }


def _run_collect(exporter: IcapExporter, as_json: bool) -> int:
    try:
        snapshot = exporter.collect()
    except CollectionError as exc:
        print(f"collection failed: {exc} ({error_category_to_reason(exc.category)})", file=sys.stderr)
        return 1
    if as_json:
        _print_json(snapshot.to_dict())
    else:
        _print_snapshot(snapshot, exporter.target)
    return 0


def _run_health(exporter: IcapExporter, as_json: bool) -> int:
    verdict = exporter.check_health()
    if as_json:
        _print_json(_verdict_dict(verdict))
    elif verdict.alive:
        print("icap-service is available")
    else:
        suffix = f": {verdict.error}" if verdict.error else f" (status {verdict.status_code})"
        print(f"icap-service is not available{suffix}")
    return 0 if verdict.alive else 1


def _run_healthcheck(settings: ExporterSettings, url: str | None) -> int:
    target = url or f"http://127.0.0.1:{settings.metrics_port}/health/live"
    try:
        response = httpx.get(target, timeout=HEALTHCHECK_TIMEOUT)
    except httpx.HTTPError as exc:
        print(f"healthcheck failed: {exc}", file=sys.stderr)
        return 1
    print(response.text)
    return 0 if response.status_code == 200 else 1


def _run_serve(exporter: IcapExporter, log_level: str) -> int:
    import uvicorn

    from ..exporter.app import create_app

    settings = exporter.settings
    logger.info("Exporting %s on %s:%s", exporter.target, settings.listen_host, settings.metrics_port)
    uvicorn.run(
        create_app(exporter),
        host=settings.listen_host,
        port=settings.metrics_port,
        log_level=server_log_level(log_level),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    log_level = setup_logging(args.log_level)

    settings = _apply_overrides(load_exporter_settings(), args)
    command = args.command or "serve"

    if command == "healthcheck":
        return _run_healthcheck(settings, args.url)

    exporter = IcapExporter(settings)
    if command == "collect":
        return _run_collect(exporter, args.json)
    if command == "health":
        return _run_health(exporter, args.json)
    return _run_serve(exporter, log_level)


if __name__ == "__main__":
    raise SystemExit(main())
