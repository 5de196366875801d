"""
Signer configuration and wiring.

Settings are read once into an explicit SignerConfig which is then used to
build the backend and SigningClient.
"""
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from licenses.application.services.signing_client import SigningClient
from licenses.infrastructure.backends.in_memory_backend import InMemorySigningBackend
from licenses.infrastructure.backends.vault_transit_backend import VaultTransitBackend
from licenses.ports.signing_backend import SigningBackend

logger = logging.getLogger(__name__)

BACKEND_VAULT = "vault"
BACKEND_MEMORY = "memory"


@dataclass(frozen=True)
class SignerConfig:
    """Connection settings for the key-management signer."""

    backend: str = BACKEND_VAULT
    address: str = "http://127.0.0.1:8200"
    token: str = ""
    key_name: str = "license-signing-key"
    mount: str = "transit"
    timeout_seconds: float = 5.0
    private_key: Optional[str] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.backend not in (BACKEND_VAULT, BACKEND_MEMORY):
            raise ImproperlyConfigured(f"Unknown signer backend: {self.backend}")
        if not self.key_name:
            raise ImproperlyConfigured("Signer key name is required")
        if self.timeout_seconds <= 0:
            raise ImproperlyConfigured("Signer timeout must be positive")
        if self.backend == BACKEND_VAULT and not self.token:
            raise ImproperlyConfigured("Vault signer requires a token")

    def __repr__(self) -> str:
        token = "***" if self.token else ""
        return (
            f"SignerConfig(backend={self.backend!r}, key_name={self.key_name!r}, "
            f"mount={self.mount!r}, timeout_seconds={self.timeout_seconds!r}, token={token!r})"
        )

    @classmethod
    def from_settings(cls, values: Mapping[str, Any]) -> "SignerConfig":
        """
        Build config from a ``LICENSE_SIGNER`` settings dictionary.

        Args:
            values: Settings dictionary with upper-case keys
        """
        timeout = values.get("TIMEOUT_SECONDS", cls.timeout_seconds)
        try:
            timeout_seconds = float(timeout)
        except (TypeError, ValueError) as e:
            raise ImproperlyConfigured(f"Invalid signer timeout: {timeout!r}") from e
        return cls(
            backend=values.get("BACKEND", BACKEND_VAULT),
            address=values.get("ADDRESS", cls.address),
            token=values.get("TOKEN", ""),
            key_name=values.get("KEY_NAME", cls.key_name),
            mount=values.get("MOUNT", cls.mount),
            timeout_seconds=timeout_seconds,
            private_key=values.get("PRIVATE_KEY") or None,
        )


def build_signing_backend(config: SignerConfig) -> SigningBackend:
    """Create the backend described by config."""
    if config.backend == BACKEND_MEMORY:
        if config.private_key:
            try:
                return InMemorySigningBackend.from_private_bytes(config.key_name, config.private_key)
            except ValueError as e:
                raise ImproperlyConfigured(f"Invalid in-memory signing key: {e}") from e
        logger.warning("Using an ephemeral in-memory signing key; licenses will not survive restarts")
        return InMemorySigningBackend(key_name=config.key_name)

    return VaultTransitBackend(
        address=config.address,
        token=config.token,
        key_name=config.key_name,
        mount=config.mount,
        timeout_seconds=config.timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_signing_client() -> SigningClient:
    """
    Return the process-wide SigningClient built from Django settings.

    The client holds no mutable state, so sharing it between requests is safe.
    """
    config = SignerConfig.from_settings(getattr(settings, "LICENSE_SIGNER", {}))
    logger.info("Configuring signer: %r", config)
    return SigningClient(build_signing_backend(config), timeout_seconds=config.timeout_seconds)
