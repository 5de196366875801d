"""
In-memory signing backend.

Holds an Ed25519 keypair in process. Used for tests and local development
in place of the key-management service.
"""
import base64
import binascii
from typing import Any, Dict, List, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from licenses.ports.signing_backend import SignerBackendError, SigningBackend

SIGNATURE_PREFIX = "memory:v1:"


class InMemorySigningBackend(SigningBackend):
    """SigningBackend that signs with a local Ed25519 key."""

    def __init__(
        self,
        key_name: str = "license-signing-key",
        private_key: Optional[Ed25519PrivateKey] = None,
    ):
        """
        Initialize backend.

        Args:
            key_name: Name reported for the signing key
            private_key: Key to sign with (generated if not provided)
        """
        self.key_name = key_name
        self._private_key = private_key or Ed25519PrivateKey.generate()
        self._public_key: Ed25519PublicKey = self._private_key.public_key()

    @classmethod
    def from_private_bytes(cls, key_name: str, encoded_key: str) -> "InMemorySigningBackend":
        """
        Build a backend from a base64-encoded raw 32-byte private key.

        Raises:
            ValueError: If the key is not valid base64 or not 32 bytes
        """
        try:
            raw = base64.b64decode(encoded_key, validate=True)
        except binascii.Error as e:
            raise ValueError("Signing key is not valid base64") from e
        return cls(key_name=key_name, private_key=Ed25519PrivateKey.from_private_bytes(raw))

    def __repr__(self) -> str:
        return f"InMemorySigningBackend(key_name={self.key_name!r})"

    @property
    def public_key_b64(self) -> str:
        """Raw public key, base64-encoded."""
        raw = self._public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)
        return base64.b64encode(raw).decode("ascii")

    async def sign(self, payload: bytes) -> str:
        """Sign payload with the local key."""
        signature = self._private_key.sign(payload)
        return SIGNATURE_PREFIX + base64.b64encode(signature).decode("ascii")

    async def verify(self, payload: bytes, signature: str) -> bool:
        """Verify signature; malformed signatures simply do not verify."""
        if not isinstance(signature, str) or not signature.startswith(SIGNATURE_PREFIX):
            return False
        try:
            raw = base64.b64decode(signature[len(SIGNATURE_PREFIX):], validate=True)
            self._public_key.verify(raw, payload)
        except (binascii.Error, InvalidSignature):
            return False
        return True

    async def list_keys(self) -> List[str]:
        """The only key is the local one."""
        return [self.key_name]

    async def read_key(self, name: str) -> Dict[str, Any]:
        """Describe the local key."""
        if name != self.key_name:
            raise SignerBackendError(
                f"Unknown signing key {name}", reason="rejected", status_code=404
            )
        return {
            "name": self.key_name,
            "type": "ed25519",
            "latest_version": 1,
            "supports_signing": True,
            "keys": {"1": {"public_key": self.public_key_b64}},
        }

    async def health(self) -> Dict[str, Any]:
        """The local key is always available."""
        return {"initialized": True, "sealed": False, "backend": "memory"}
