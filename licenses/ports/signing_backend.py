"""
Signing backend port (interface).

This defines the contract for the external key-management service that
signs and verifies license payloads. Implementations are in the
infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class SignerBackendError(Exception):
    """
    Raised by backends when the signer cannot be used.

    Args:
        message: Description safe to surface (no credentials or addresses)
        reason: One of "timeout", "transport", "rejected", "malformed_response"
        status_code: HTTP status returned by the signer, if any
    """

    def __init__(self, message: str, reason: str = "transport", status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.status_code = status_code


class SigningBackend(ABC):
    """
    Abstract key-management backend.

    This is a port in hexagonal architecture - it defines the signing
    capability the lifecycle depends on, not how it is provided.
    """

    #: Name of the key used to sign licenses
    key_name: str

    @abstractmethod
    async def sign(self, payload: bytes) -> str:
        """
        Sign a canonical payload.

        Args:
            payload: Canonical license bytes

        Returns:
            Detached signature string

        Raises:
            SignerBackendError: If the signer is unreachable or refuses
        """
        pass

    @abstractmethod
    async def verify(self, payload: bytes, signature: str) -> bool:
        """
        Verify a detached signature over a canonical payload.

        Args:
            payload: Canonical license bytes
            signature: Signature to check

        Returns:
            True if the signature matches the payload

        Raises:
            SignerBackendError: If the signer is unreachable or refuses
        """
        pass

    @abstractmethod
    async def list_keys(self) -> List[str]:
        """
        List the signing keys known to the signer.

        Raises:
            SignerBackendError: If the signer is unreachable or refuses
        """
        pass

    @abstractmethod
    async def read_key(self, name: str) -> Dict[str, Any]:
        """
        Fetch metadata for a signing key.

        Raises:
            SignerBackendError: With status_code 404 when the key is unknown
        """
        pass

    @abstractmethod
    async def health(self) -> Dict[str, Any]:
        """
        Report the signer's health.

        Raises:
            SignerBackendError: If the signer is unreachable or unhealthy
        """
        pass
