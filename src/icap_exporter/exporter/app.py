# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
HTTP surface of the exporter.

Exposes::

    GET /metrics            - Prometheus text exposition
    GET /health/live        - 200 when the ICAP service answers OPTIONS with 200, else 503
    GET /health/readiness   - same check as /health/live
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ..runtime import IcapExporter
from ..version import __version__

logger = logging.getLogger(__name__)

AVAILABLE_MESSAGE = "icap-service is available"
UNAVAILABLE_MESSAGE = "icap-service is not available"


def create_app(exporter: IcapExporter | None = None) -> FastAPI:
    exporter = exporter or IcapExporter()
    registry = exporter.build_registry()
    app = FastAPI(title="ICAP Exporter", version=__version__)

    # Plain `def` handlers run in the threadpool, so blocking probes do not stall the event loop.
    @app.get("/metrics")
    def metrics() -> Response:
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    def _health() -> PlainTextResponse:
        verdict = exporter.check_health()
        if not verdict.alive:
            return PlainTextResponse(UNAVAILABLE_MESSAGE, status_code=503)
        return PlainTextResponse(AVAILABLE_MESSAGE)

    app.add_api_route("/health/live", _health, methods=["GET"], name="health_live")
    app.add_api_route("/health/readiness", _health, methods=["GET"], name="health_readiness")

    logger.debug("Exporter app created for %s", exporter.target)
    return app


__all__ = ["AVAILABLE_MESSAGE", "UNAVAILABLE_MESSAGE", "create_app"]
