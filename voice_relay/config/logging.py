"""Logging configuration (env-resolved constants only)."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO.
QUIET_LOGGERS: tuple[str, ...] = ("websockets", "websockets.client", "websockets.server")

__all__ = ["LOG_FORMAT", "LOG_LEVEL", "QUIET_LOGGERS"]
