# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup shared by the CLI and the HTTP exporter."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "ICAP_EXPORTER_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Level names uvicorn accepts for its own loggers.
_SERVER_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


def resolve_log_level(level: str | None = None) -> str:
    """
    Return a canonical level name from ``level``, then $ICAP_EXPORTER_LOG_LEVEL, then INFO.

    Aliases such as ``warn`` are normalized (``WARNING``); unknown names fall back to INFO.
    """
    raw = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).strip().upper()
    numeric = logging.getLevelName(raw)
    if not isinstance(numeric, int):
        return DEFAULT_LOG_LEVEL
    return logging.getLevelName(numeric)


def server_log_level(level: str) -> str:
    """Map a level name onto the lowercase names uvicorn understands."""
    return level.lower() if level in _SERVER_LEVELS else DEFAULT_LOG_LEVEL.lower()


def setup_logging(level: str | None = None) -> str:
    """Configure root logging once and return the effective level name."""
    effective = resolve_log_level(level)
    logging.basicConfig(level=effective, format=LOG_FORMAT)
    logging.getLogger("icap_exporter").setLevel(effective)
    return effective


__all__ = ["LOG_LEVEL_ENV", "resolve_log_level", "server_log_level", "setup_logging"]
