"""
Event handlers for domain events.

The authority persists nothing, so the audit log is the only record of
issuance and renewal lineage.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import LicenseIssued, LicenseRenewed

logger = logging.getLogger(__name__)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Logs license events as structured records.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        extra = event.to_dict()
        if isinstance(event, LicenseRenewed):
            extra["renewed_from"] = event.renewed_from
            extra["expires_at"] = event.new_expiration.isoformat()
        elif isinstance(event, LicenseIssued):
            extra["customer"] = event.customer
            extra["expires_at"] = event.expires_at.isoformat()

        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra=extra,
        )


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    audit_handler = AuditLogEventHandler()

    event_bus.subscribe(LicenseIssued, audit_handler)
    event_bus.subscribe(LicenseRenewed, audit_handler)

    logger.info("Event handlers registered")
