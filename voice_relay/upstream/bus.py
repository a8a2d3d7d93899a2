"""Ordered publish/subscribe fan-out used by the upstream session."""

from __future__ import annotations

import inspect
import logging
import itertools
from typing import Any, Generic, TypeVar
from collections.abc import Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")

Subscriber = Callable[[T], Any]


class EventBus(Generic[T]):
    """Delivers each published item to subscribers in subscription order.

    Async subscribers are awaited one at a time, so a single publisher's items
    reach every subscriber in publish order. A subscriber removed during a
    publish receives nothing further, including the item in flight.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._ids = itertools.count()
        self._subscribers: dict[int, Subscriber[T]] = {}

    def __len__(self) -> int:
        return len(self._subscribers)

    def subscribe(self, subscriber: Subscriber[T]) -> Callable[[], None]:
        sub_id = next(self._ids)
        self._subscribers[sub_id] = subscriber

        def _unsubscribe() -> None:
            self._subscribers.pop(sub_id, None)

        return _unsubscribe

    async def publish(self, item: T) -> None:
        for sub_id, subscriber in list(self._subscribers.items()):
            if sub_id not in self._subscribers:
                continue
            try:
                result = subscriber(item)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("%s subscriber failed", self._name)


__all__ = ["EventBus"]
