"""Runtime dependency construction (upstream session factory + connection registry)."""

from __future__ import annotations

import logging
from functools import partial

from voice_relay.state import RuntimeDeps
from voice_relay.state.settings import AppSettings
from voice_relay.upstream.client import UpstreamSession
from voice_relay.handlers.connections import ConnectionRegistry

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()

    if not settings.upstream.api_key:
        # Not fatal at startup: each session fails with ConfigurationError on connect.
        logger.warning("OPENAI_API_KEY is not set; upstream connections will be refused")

    session_factory = partial(
        UpstreamSession,
        upstream=settings.upstream,
        session=settings.session,
        reconnect=settings.reconnect,
    )

    return RuntimeDeps(
        connections=ConnectionRegistry(),
        session_factory=session_factory,
        settings=settings,
    )


__all__ = ["build_runtime_deps"]
