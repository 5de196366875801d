"""
IssueLicenseHandler.

Handles the issue license command.
"""

from core.infrastructure.events import event_bus
from core.metrics import licenses_issued_total
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import LicenseIssued
from licenses.domain.services import LicenseLifecycleManager


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        """Initialize handler with the lifecycle manager."""
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, command: IssueLicenseCommand) -> LicenseDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            LicenseDTO of the signed license

        Raises:
            InvalidRequestError: If the command is incomplete
            SigningUnavailableError: If the signer fails
        """
        license = await self.lifecycle_manager.issue(
            customer=command.customer,
            modules=command.modules,
            expires_at=command.expires_at,
            timeout=command.timeout_seconds,
        )
        licenses_issued_total.inc()

        await event_bus.publish(
            LicenseIssued(
                license_id=license.license_id,
                customer=license.customer,
                expires_at=license.expires_at,
            )
        )

        return LicenseDTO.from_entity(license)
