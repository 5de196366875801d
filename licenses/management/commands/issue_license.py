"""
Django management command to issue a signed license.

Prints the license as JSON so it can be handed to the customer.
"""

import asyncio
import json
import logging

from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import InvalidRequestError, SigningUnavailableError
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.domain.license import License, parse_timestamp
from licenses.domain.services import LicenseLifecycleManager
from licenses.infrastructure.signer_config import get_signing_client

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to issue a license."""

    help = "Issue a signed license and print it as JSON"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("--customer", required=True, help="License holder")
        parser.add_argument(
            "--module",
            dest="modules",
            action="append",
            required=True,
            help="Entitlement to grant (repeatable)",
        )
        parser.add_argument(
            "--expires-at",
            required=True,
            help="Expiration as an ISO-8601 timestamp",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=None,
            help="Seconds to wait for the signer",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        try:
            expires_at = parse_timestamp(options["expires_at"], "expires_at")
            handler = IssueLicenseHandler(LicenseLifecycleManager(get_signing_client()))
            command = IssueLicenseCommand(
                customer=options["customer"],
                modules=options["modules"],
                expires_at=expires_at,
                timeout_seconds=options["timeout"],
            )
            result = asyncio.run(handler.handle(command))
        except (InvalidRequestError, SigningUnavailableError) as e:
            raise CommandError(f"{e.code}: {e.message}") from e

        license = License(**result.__dict__)
        self.stdout.write(json.dumps(license.to_dict(), indent=2))
        logger.info("Issued license %s from the command line", license.license_id)
