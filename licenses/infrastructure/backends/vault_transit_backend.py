"""
Vault transit signing backend.

Signs and verifies license payloads with a named key of a HashiCorp Vault
transit secrets engine.
"""
import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from licenses.ports.signing_backend import SignerBackendError, SigningBackend

logger = logging.getLogger(__name__)


class VaultTransitBackend(SigningBackend):
    """SigningBackend backed by Vault's transit engine over HTTP."""

    def __init__(
        self,
        address: str,
        token: str,
        key_name: str = "license-signing-key",
        mount: str = "transit",
        timeout_seconds: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize backend.

        Args:
            address: Vault base URL
            token: Vault token sent with every request
            key_name: Transit key used to sign licenses
            mount: Mount path of the transit engine
            timeout_seconds: HTTP timeout per request
            transport: Optional httpx transport (used by tests)
        """
        self.address = address.rstrip("/")
        self._token = token
        self.key_name = key_name
        self.mount = mount.strip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def __repr__(self) -> str:
        return f"VaultTransitBackend(key_name={self.key_name!r}, mount={self.mount!r})"

    def _client(self) -> httpx.AsyncClient:
        # One client per call so no connection outlives its event loop
        return httpx.AsyncClient(
            base_url=self.address,
            headers={
                "X-Vault-Token": self._token,
                "Content-Type": "application/json",
            },
            timeout=self.timeout_seconds,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send a request to Vault and return the ``data`` section of the reply.

        Raises:
            SignerBackendError: On transport failure, non-2xx status or a
                reply without a ``data`` object
        """
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=json, params=params)
        except httpx.TimeoutException as e:
            logger.warning("Vault %s timed out: %s", operation, type(e).__name__)
            raise SignerBackendError(f"Signer {operation} timed out", reason="timeout") from e
        except httpx.HTTPError as e:
            logger.warning("Vault %s transport error: %s", operation, type(e).__name__)
            raise SignerBackendError(
                f"Signer {operation} could not reach the signer", reason="transport"
            ) from e

        if not response.is_success:
            logger.warning(
                "Vault %s rejected with status %s: %s",
                operation,
                response.status_code,
                _vault_errors(response),
            )
            raise SignerBackendError(
                f"Signer {operation} rejected with status {response.status_code}",
                reason="rejected",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise SignerBackendError(
                f"Signer {operation} returned a non-JSON response",
                reason="malformed_response",
                status_code=response.status_code,
            ) from e

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise SignerBackendError(
                f"Signer {operation} response has no data",
                reason="malformed_response",
                status_code=response.status_code,
            )
        return data

    async def sign(self, payload: bytes) -> str:
        """Sign payload with the transit key."""
        data = await self._request(
            "POST",
            f"/v1/{self.mount}/sign/{self.key_name}",
            "sign",
            json={"input": _b64(payload)},
        )
        signature = data.get("signature")
        if not isinstance(signature, str) or not signature:
            raise SignerBackendError(
                "Signer sign response has no signature", reason="malformed_response"
            )
        return signature

    async def verify(self, payload: bytes, signature: str) -> bool:
        """Verify signature over payload with the transit key."""
        data = await self._request(
            "POST",
            f"/v1/{self.mount}/verify/{self.key_name}",
            "verify",
            json={"input": _b64(payload), "signature": signature},
        )
        valid = data.get("valid")
        if not isinstance(valid, bool):
            raise SignerBackendError(
                "Signer verify response has no verdict", reason="malformed_response"
            )
        return valid

    async def list_keys(self) -> List[str]:
        """List transit keys."""
        data = await self._request(
            "GET", f"/v1/{self.mount}/keys", "list_keys", params={"list": "true"}
        )
        keys = data.get("keys")
        if not isinstance(keys, list):
            raise SignerBackendError(
                "Signer list_keys response has no keys", reason="malformed_response"
            )
        return keys

    async def read_key(self, name: str) -> Dict[str, Any]:
        """Read transit key metadata."""
        return await self._request("GET", f"/v1/{self.mount}/keys/{name}", "read_key")

    async def health(self) -> Dict[str, Any]:
        """
        Read Vault's health status.

        ``/sys/health`` replies without a ``data`` envelope, so it is read
        directly.
        """
        try:
            async with self._client() as client:
                response = await client.get("/v1/sys/health")
        except httpx.HTTPError as e:
            reason = "timeout" if isinstance(e, httpx.TimeoutException) else "transport"
            raise SignerBackendError("Signer health check failed", reason=reason) from e

        if not response.is_success:
            raise SignerBackendError(
                f"Signer reports unhealthy status {response.status_code}",
                reason="rejected",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise SignerBackendError(
                "Signer health response is not JSON", reason="malformed_response"
            ) from e


def _b64(payload: bytes) -> str:
    return base64.b64encode(payload).decode("ascii")


def _vault_errors(response: httpx.Response) -> List[str]:
    """Extract Vault's ``errors`` list from a response, if any."""
    try:
        body = response.json()
    except ValueError:
        return []
    errors = body.get("errors") if isinstance(body, dict) else None
    return errors if isinstance(errors, list) else []
