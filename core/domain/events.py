"""
Domain event base classes.

Events record license lifecycle facts (a license was issued, a license was
renewed) for consumers that must not slow down or fail the operation.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Type
from uuid import uuid4


class DomainEvent(ABC):
    """
    Base class for all domain events.

    Domain events represent something that happened in the domain.
    Subclasses pass the aggregate identifier and may add their own fields.
    """

    def __init__(self, aggregate_id: str, occurred_at: datetime = None):
        """
        Initialize the event.

        Args:
            aggregate_id: Identifier of the aggregate the event is about
            occurred_at: When the event occurred (defaults to now, UTC)
        """
        self.event_id = uuid4()
        self.occurred_at = occurred_at or datetime.now(timezone.utc)
        self.aggregate_id = aggregate_id

    @property
    def event_type(self) -> str:
        """Event type name."""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "event_type": self.event_type,
        }


class EventHandler(ABC):
    """Reacts to published domain events, e.g. by writing an audit record."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """Process one event. Exceptions are reported by the bus, not the publisher."""


class EventBus(ABC):
    """Routes domain events from publishers to subscribed handlers."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to the handlers subscribed to its type."""

    @abstractmethod
    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """Register ``handler`` for events of ``event_type``."""
