"""
In-memory event bus implementation.

Handlers run in-process; the service holds no other state, so there is
nothing to deliver out of band.
"""

import asyncio
import logging
from collections import defaultdict
from typing import DefaultDict, List, Type

from core.domain.events import DomainEvent, EventBus, EventHandler

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    Event bus that dispatches to in-process handlers.

    All handlers of an event run concurrently and are awaited before
    ``publish`` returns. A handler failure is logged and swallowed here:
    a license that was already signed must still reach the caller.
    """

    def __init__(self):
        self._handlers: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe a handler to an event type.

        Subscribing a second handler of the same class is a no-op, so app
        start-up may run more than once without duplicating audit records.
        """
        registered = self._handlers[event_type]
        if any(type(existing) is type(handler) for existing in registered):
            return
        registered.append(handler)
        logger.debug("Subscribed %s to %s", type(handler).__name__, event_type.__name__)

    def clear(self) -> None:
        """Remove all subscriptions."""
        self._handlers.clear()

    async def publish(self, event: DomainEvent) -> None:
        """Deliver an event to every handler subscribed to its type."""
        handlers = list(self._handlers.get(type(event), ()))
        if not handlers:
            logger.debug("No handlers registered for %s", event.event_type)
            return

        results = await asyncio.gather(
            *(handler.handle(event) for handler in handlers), return_exceptions=True
        )
        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(
                    "Error handling %s with %s: %s",
                    event.event_type,
                    type(handler).__name__,
                    result,
                    exc_info=result,
                )


# Global event bus instance
event_bus = InMemoryEventBus()
