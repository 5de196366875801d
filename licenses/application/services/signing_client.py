"""
Signing client.

Wraps a SigningBackend with canonical encoding, timeouts and the error
policy of the license authority: signing fails loud, verification fails
closed.
"""
import asyncio
import logging
import time
from typing import Any, Awaitable, Dict, List, Mapping, Optional, TypeVar

from core.domain.exceptions import (
    InvalidRequestError,
    SigningKeyNotFoundError,
    SigningUnavailableError,
)
from core.metrics import signer_request_duration_seconds, signer_requests_total
from licenses.domain import canonical
from licenses.ports.signing_backend import SignerBackendError, SigningBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SigningClient:
    """Client for the key-management signer."""

    def __init__(self, backend: SigningBackend, timeout_seconds: float = 5.0):
        """
        Initialize client.

        Args:
            backend: Signer implementation
            timeout_seconds: Default bound on each signer call
        """
        self.backend = backend
        self.timeout_seconds = timeout_seconds

    @property
    def key_name(self) -> str:
        """Name of the key licenses are signed with."""
        return self.backend.key_name

    async def _call(self, operation: str, awaitable: Awaitable[T], timeout: Optional[float]) -> T:
        """
        Await a backend call under a timeout, recording metrics.

        Raises:
            SignerBackendError: On backend failure or timeout
        """
        bound = self.timeout_seconds if timeout is None else timeout
        started = time.monotonic()
        status = "error"
        try:
            if bound <= 0:
                # Budget already spent; do not start the call at all
                awaitable.close()
                raise SignerBackendError(f"Signer {operation} timed out", reason="timeout")
            result = await asyncio.wait_for(awaitable, timeout=bound)
            status = "success"
            return result
        except asyncio.TimeoutError as e:
            status = "timeout"
            raise SignerBackendError(f"Signer {operation} timed out", reason="timeout") from e
        except asyncio.CancelledError:
            status = "cancelled"
            raise
        finally:
            signer_requests_total.labels(operation=operation, status=status).inc()
            signer_request_duration_seconds.labels(operation=operation).observe(
                time.monotonic() - started
            )

    async def sign(self, fields: Mapping[str, Any], timeout: Optional[float] = None) -> str:
        """
        Sign license fields.

        Args:
            fields: License fields (signature excluded)
            timeout: Bound on the signer call (defaults to client timeout)

        Returns:
            Detached signature

        Raises:
            InvalidRequestError: If fields cannot be canonicalized
            SigningUnavailableError: If the signer fails, times out or replies
                without a signature
        """
        payload = canonical.encode(fields)
        try:
            signature = await self._call("sign", self.backend.sign(payload), timeout)
        except SignerBackendError as e:
            logger.error("License signing failed: %s (reason=%s)", e.message, e.reason)
            raise SigningUnavailableError(
                f"Failed to sign license: {e.message}",
                reason=e.reason,
                status_code=e.status_code,
            ) from e
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("License signing failed unexpectedly: %s", e, exc_info=True)
            raise SigningUnavailableError(
                "Failed to sign license: unexpected signer error", reason="transport"
            ) from e

        if not isinstance(signature, str) or not signature:
            logger.error("License signing returned an empty signature")
            raise SigningUnavailableError(
                "Failed to sign license: signer returned no signature",
                reason="malformed_response",
            )
        return signature

    async def verify(
        self,
        fields: Mapping[str, Any],
        signature: str,
        timeout: Optional[float] = None,
    ) -> bool:
        """
        Verify a signature over license fields.

        Any failure, including an unreachable signer, yields False.

        Args:
            fields: License fields (signature excluded)
            signature: Signature to check
            timeout: Bound on the signer call (defaults to client timeout)

        Returns:
            True only if the signer confirmed the signature
        """
        if not signature:
            return False
        try:
            payload = canonical.encode(fields)
        except InvalidRequestError as e:
            logger.warning("License verification failed: %s", e.message)
            return False

        try:
            valid = await self._call("verify", self.backend.verify(payload, signature), timeout)
        except SignerBackendError as e:
            logger.warning(
                "License verification failed closed: %s (reason=%s)", e.message, e.reason
            )
            return False
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("License verification failed closed: %s", e, exc_info=True)
            return False
        return valid is True

    async def list_keys(self, timeout: Optional[float] = None) -> List[str]:
        """
        List signing keys.

        Raises:
            SigningUnavailableError: If the signer fails
        """
        try:
            return await self._call("list_keys", self.backend.list_keys(), timeout)
        except SignerBackendError as e:
            raise SigningUnavailableError(
                f"Failed to list keys: {e.message}", reason=e.reason, status_code=e.status_code
            ) from e

    async def read_key(self, name: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Fetch signing key metadata.

        Raises:
            SigningKeyNotFoundError: If the key does not exist
            SigningUnavailableError: If the signer fails
        """
        try:
            return await self._call("read_key", self.backend.read_key(name), timeout)
        except SignerBackendError as e:
            if e.status_code == 404:
                raise SigningKeyNotFoundError(f"Signing key {name} not found") from e
            raise SigningUnavailableError(
                f"Failed to get key information: {e.message}",
                reason=e.reason,
                status_code=e.status_code,
            ) from e

    async def health(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Check signer health.

        Raises:
            SigningUnavailableError: If the signer is unreachable or unhealthy
        """
        try:
            return await self._call("health", self.backend.health(), timeout)
        except SignerBackendError as e:
            raise SigningUnavailableError(
                f"Signer is unhealthy: {e.message}", reason=e.reason, status_code=e.status_code
            ) from e
