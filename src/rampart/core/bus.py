"""In-process event bus between the simulation core and display consumers.

Topics published by the core:

- ``"log"`` with ``entry=LogEntry``
- ``"explosion"`` with ``explosion=Explosion``
- ``"tick"`` with ``snapshot=SimulationSnapshot``
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class EventBus:
    """Synchronous publish/subscribe.

    Callbacks run in publish order on the caller's thread. A failing
    subscriber is logged and skipped; it never interrupts the publisher.
    """

    def __init__(self):
        self._subscribers: dict[str, list[Callable[..., Any]]] = defaultdict(list)

    def subscribe(self, topic: str, callback: Callable[..., Any]) -> None:
        self._subscribers[topic].append(callback)

    def unsubscribe(self, topic: str, callback: Callable[..., Any]) -> None:
        if callback in self._subscribers[topic]:
            self._subscribers[topic].remove(callback)

    def publish(self, topic: str, **kwargs: Any) -> None:
        for callback in list(self._subscribers.get(topic, [])):
            try:
                callback(**kwargs)
            except Exception:
                logger.exception("EventBus subscriber failed on '%s'", topic)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))
