"""Per-browser connection record."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from dataclasses import field, dataclass
from collections.abc import Callable

if TYPE_CHECKING:
    from voice_relay.upstream.client import UpstreamSession


@dataclass(slots=True)
class Connection:
    connection_id: str
    websocket: Any
    session: UpstreamSession
    subscriptions: list[Callable[[], None]] = field(default_factory=list)
    closed: bool = False

    @property
    def subscribed(self) -> bool:
        return bool(self.subscriptions)

    def unsubscribe_all(self) -> None:
        while self.subscriptions:
            unsubscribe = self.subscriptions.pop()
            unsubscribe()


__all__ = ["Connection"]
