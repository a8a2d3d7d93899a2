"""Registry of live browser connections and their upstream sessions."""

from __future__ import annotations

import uuid
import asyncio
import logging
import contextlib
from typing import Any

from voice_relay.state.connection import Connection
from voice_relay.upstream.client import UpstreamSession

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._connections

    def register(self, websocket: Any, session: UpstreamSession) -> Connection:
        connection = Connection(connection_id=uuid.uuid4().hex, websocket=websocket, session=session)
        self._connections[connection.connection_id] = connection
        return connection

    def readmit(self, connection: Connection) -> None:
        """Track a released connection again (browser sent `connect` after `disconnect`)."""
        self._connections[connection.connection_id] = connection

    def release(self, connection_id: str) -> Connection | None:
        """Forget a connection. Releasing an unknown id is a no-op."""
        return self._connections.pop(connection_id, None)

    def get_connection_count(self) -> int:
        return len(self._connections)

    async def close_all(self) -> None:
        connections = list(self._connections.values())
        self._connections.clear()
        for connection in connections:
            connection.closed = True
            connection.unsubscribe_all()
        results = await asyncio.gather(
            *(connection.session.disconnect() for connection in connections),
            return_exceptions=True,
        )
        for connection, result in zip(connections, results):
            if isinstance(result, Exception):
                logger.warning("session disconnect failed id=%s: %s", connection.connection_id, result)
        for connection in connections:
            with contextlib.suppress(Exception):
                await connection.websocket.close()


__all__ = ["ConnectionRegistry"]
