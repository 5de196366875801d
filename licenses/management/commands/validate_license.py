"""
Django management command to validate a license file.
"""

import asyncio
import json
import sys

from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import InvalidRequestError
from licenses.application.handlers.license_lifecycle_handlers import ValidateLicenseHandler
from licenses.application.queries.validate_license import ValidateLicenseQuery
from licenses.domain.license import License
from licenses.domain.services import LicenseLifecycleManager
from licenses.infrastructure.signer_config import get_signing_client


class Command(BaseCommand):
    """Command to validate a license."""

    help = "Validate a license read from a JSON file ('-' for stdin)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("path", help="Path to the license JSON, or '-' for stdin")
        parser.add_argument(
            "--timeout",
            type=float,
            default=None,
            help="Seconds to wait for the signer",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        data = self._read(options["path"])
        # Accept both a bare license and an API response wrapping one
        if isinstance(data, dict) and isinstance(data.get("license"), dict):
            data = data["license"]

        try:
            license = License.from_dict(data)
            handler = ValidateLicenseHandler(LicenseLifecycleManager(get_signing_client()))
            query = ValidateLicenseQuery(license=license, timeout_seconds=options["timeout"])
            result = asyncio.run(handler.handle(query))
        except InvalidRequestError as e:
            raise CommandError(f"{e.code}: {e.message}") from e

        self.stdout.write(
            json.dumps(
                {
                    "valid": result.valid,
                    "signature_valid": result.signature_valid,
                    "expired": result.expired,
                    "license_id": license.license_id,
                },
                indent=2,
            )
        )
        if result.valid:
            self.stdout.write(self.style.SUCCESS("License is valid"))  # pylint: disable=no-member
        else:
            self.stdout.write(self.style.WARNING("License is NOT valid"))  # pylint: disable=no-member

    def _read(self, path):
        """Load license JSON from a file or stdin."""
        try:
            if path == "-":
                return json.load(sys.stdin)
            with open(path, encoding="utf-8") as handle:
                return json.load(handle)
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e}") from e
        except ValueError as e:
            raise CommandError(f"{path} is not valid JSON: {e}") from e
