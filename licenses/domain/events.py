"""
License domain events.

Domain events represent something that happened in the license domain.
"""

from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class LicenseIssued(DomainEvent):
    """Event raised when a license is issued."""

    def __init__(
        self,
        license_id: str,
        customer: str,
        expires_at: datetime,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseIssued event.

        Args:
            license_id: Identifier of the issued license
            customer: License holder
            expires_at: Expiration of the issued license
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.customer = customer
        self.expires_at = expires_at


class LicenseRenewed(DomainEvent):
    """Event raised when a license is renewed into a new license."""

    def __init__(
        self,
        license_id: str,
        renewed_from: str,
        new_expiration: datetime,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseRenewed event.

        Args:
            license_id: Identifier of the new license
            renewed_from: Identifier of the superseded license
            new_expiration: Expiration of the new license
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.renewed_from = renewed_from
        self.new_expiration = new_expiration
