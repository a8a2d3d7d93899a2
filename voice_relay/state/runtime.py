"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from collections.abc import Callable

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from voice_relay.state.settings import AppSettings
    from voice_relay.upstream.client import UpstreamSession
    from voice_relay.handlers.connections import ConnectionRegistry


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionRegistry
    session_factory: Callable[[], UpstreamSession]
    settings: AppSettings

    async def shutdown(self) -> None:
        try:
            await self.connections.close_all()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
