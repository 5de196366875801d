"""
License lifecycle handlers.

Handlers for the validate license query and the renew license command.
"""

from core.domain.exceptions import InvalidLicenseError
from core.infrastructure.events import event_bus
from core.metrics import (
    license_renewals_rejected_total,
    license_validations_total,
    licenses_renewed_total,
)
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO, LicenseValidationDTO
from licenses.application.queries.validate_license import ValidateLicenseQuery
from licenses.domain.events import LicenseRenewed
from licenses.domain.services import LicenseLifecycleManager


class ValidateLicenseHandler:
    """Handler for ValidateLicenseQuery."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        """Initialize handler with the lifecycle manager."""
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, query: ValidateLicenseQuery) -> LicenseValidationDTO:
        """
        Handle validate license query.

        Args:
            query: ValidateLicenseQuery

        Returns:
            LicenseValidationDTO with the outcome and the checked license

        Raises:
            InvalidRequestError: If the license is missing or unsigned
        """
        result = await self.lifecycle_manager.validate(
            query.license, timeout=query.timeout_seconds
        )

        if result.valid:
            outcome = "valid"
        elif not result.signature_valid:
            outcome = "bad_signature"
        else:
            outcome = "expired"
        license_validations_total.labels(outcome=outcome).inc()

        return LicenseValidationDTO(
            valid=result.valid,
            signature_valid=result.signature_valid,
            expired=result.expired,
            license=LicenseDTO.from_entity(query.license),
        )


class RenewLicenseHandler:
    """Handler for RenewLicenseCommand."""

    def __init__(self, lifecycle_manager: LicenseLifecycleManager):
        """Initialize handler with the lifecycle manager."""
        self.lifecycle_manager = lifecycle_manager

    async def handle(self, command: RenewLicenseCommand) -> LicenseDTO:
        """
        Handle renew license command.

        Args:
            command: RenewLicenseCommand

        Returns:
            LicenseDTO of the new signed license

        Raises:
            InvalidRequestError: If the command is incomplete
            InvalidLicenseError: If the license does not verify
            SigningUnavailableError: If the signer fails
        """
        try:
            renewed = await self.lifecycle_manager.renew(
                command.license,
                command.new_expires_at,
                timeout=command.timeout_seconds,
            )
        except InvalidLicenseError:
            license_renewals_rejected_total.inc()
            raise
        licenses_renewed_total.inc()

        await event_bus.publish(
            LicenseRenewed(
                license_id=renewed.license_id,
                renewed_from=renewed.renewed_from,
                new_expiration=renewed.expires_at,
            )
        )

        return LicenseDTO.from_entity(renewed)
