"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import logging
import time
from datetime import datetime
from typing import Callable, Iterable, Optional

from core.domain.exceptions import InvalidLicenseError, InvalidRequestError
from core.domain.value_objects import LicenseValidation
from licenses.domain.license import License, new_license_id, parse_timestamp, utc_now

logger = logging.getLogger(__name__)


class LicenseLifecycleManager:
    """
    Domain service for the license lifecycle.

    Issues, validates and renews licenses. Holds no mutable state; every
    call depends only on its arguments, the clock and the signer.
    """

    def __init__(
        self,
        signing_client: "SigningClient",  # noqa: F821
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_license_id,
    ):
        """
        Initialize manager.

        Args:
            signing_client: Client used to sign and verify licenses
            clock: Source of the current time
            id_factory: Source of fresh license identifiers
        """
        self.signing_client = signing_client
        self.clock = clock
        self.id_factory = id_factory

    async def issue(
        self,
        customer: str,
        modules: Iterable[str],
        expires_at: datetime,
        timeout: Optional[float] = None,
    ) -> License:
        """
        Issue a new signed license.

        Args:
            customer: License holder
            modules: Entitlements granted
            expires_at: Expiration datetime
            timeout: Bound on the signer call

        Returns:
            Signed License entity

        Raises:
            InvalidRequestError: If any input is missing or malformed
            SigningUnavailableError: If the signer fails
        """
        if not customer or not modules or not expires_at:
            raise InvalidRequestError(
                "Missing required fields: customer, modules, expires_at"
            )

        draft = License.create(
            customer=customer,
            modules=modules,
            expires_at=expires_at,
            issued_at=self.clock(),
            license_id=self.id_factory(),
        )
        signature = await self.signing_client.sign(draft.unsigned_fields(), timeout=timeout)

        logger.info("Issued license %s for %s", draft.license_id, draft.customer)
        return draft.with_signature(signature)

    async def validate(
        self,
        license: License,
        timeout: Optional[float] = None,
    ) -> LicenseValidation:
        """
        Check a license's signature and expiration.

        An inauthentic or expired license is a normal outcome, not an error.

        Args:
            license: License to check
            timeout: Bound on the signer call

        Returns:
            LicenseValidation outcome

        Raises:
            InvalidRequestError: If no license or no signature is supplied
        """
        if license is None or not license.is_signed:
            raise InvalidRequestError(
                "Invalid license format - missing license or signature"
            )

        signature_valid = await self.signing_client.verify(
            license.unsigned_fields(), license.signature, timeout=timeout
        )
        expired = license.is_expired(self.clock())

        logger.debug(
            "Validated license %s: signature_valid=%s expired=%s",
            license.license_id,
            signature_valid,
            expired,
        )
        return LicenseValidation(signature_valid=signature_valid, expired=expired)

    async def renew(
        self,
        license: License,
        new_expires_at: datetime,
        timeout: Optional[float] = None,
    ) -> License:
        """
        Renew a license into a new signed license.

        The existing signature must verify; its expiration is not checked,
        so an expired but authentic license can be renewed. The old license
        is left untouched.

        Args:
            license: License to renew
            new_expires_at: Expiration of the new license
            timeout: Overall bound on the verify and sign calls

        Returns:
            New signed License pointing back at ``license``

        Raises:
            InvalidRequestError: If inputs are missing or the license is unsigned
            InvalidLicenseError: If the license's signature does not verify
            SigningUnavailableError: If the signer fails while signing
        """
        if license is None or not new_expires_at:
            raise InvalidRequestError(
                "Missing required fields: license, new_expires_at"
            )
        if not license.is_signed:
            raise InvalidRequestError(
                "Invalid license format - missing license or signature"
            )
        new_expires_at = parse_timestamp(new_expires_at, "new_expires_at")

        started = time.monotonic()
        authentic = await self.signing_client.verify(
            license.unsigned_fields(), license.signature, timeout=timeout
        )
        if not authentic:
            logger.warning("Refusing to renew license %s: signature did not verify", license.license_id)
            raise InvalidLicenseError()

        remaining = None
        if timeout is not None:
            remaining = timeout - (time.monotonic() - started)

        draft = license.renewal_draft(
            new_expires_at=new_expires_at,
            issued_at=self.clock(),
            license_id=self.id_factory(),
        )
        signature = await self.signing_client.sign(draft.unsigned_fields(), timeout=remaining)

        logger.info("Renewed license %s as %s", license.license_id, draft.license_id)
        return draft.with_signature(signature)
