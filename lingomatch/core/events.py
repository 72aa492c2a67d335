"""Change notification channel used to refresh read-only views."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[str, dict[str, Any]], Awaitable[None]]


class ChangeChannel(Protocol):
    """Protocol for publish/subscribe providers (memory, Redis, etc.)."""

    async def publish(self, topic: str, payload: dict[str, Any]) -> int:
        """Deliver payload to every subscriber of topic, return delivery count."""

    def subscribe(self, topic: str, handler: ChangeHandler) -> Callable[[], None]:
        """Register handler for topic and return an unsubscribe callable."""


class InMemoryChangeChannel:
    """Process-local channel.

    Topics are dotted event types (``booking.created``). A subscription to a
    prefix ending in ``*`` (``availability.*``) receives every matching topic.
    Handler errors propagate to the publisher so the outbox relay can retry.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[ChangeHandler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: ChangeHandler) -> Callable[[], None]:
        self._handlers[topic].append(handler)

        def _unsubscribe() -> None:
            handlers = self._handlers.get(topic, [])
            if handler in handlers:
                handlers.remove(handler)

        return _unsubscribe

    def _handlers_for(self, topic: str) -> list[ChangeHandler]:
        matched: list[ChangeHandler] = list(self._handlers.get(topic, []))
        for pattern, handlers in self._handlers.items():
            if pattern.endswith("*") and pattern != topic and topic.startswith(pattern[:-1]):
                matched.extend(handlers)
        return matched

    async def publish(self, topic: str, payload: dict[str, Any]) -> int:
        handlers = self._handlers_for(topic)
        for handler in handlers:
            await handler(topic, payload)
        logger.debug("Published %s to %d subscriber(s)", topic, len(handlers))
        return len(handlers)


_default_channel = InMemoryChangeChannel()


def get_change_channel() -> ChangeChannel:
    """Return process-wide change channel."""
    return _default_channel
