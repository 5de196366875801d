"""
Signing backends with scripted behaviour for tests.
"""

import asyncio

from licenses.infrastructure.backends.in_memory_backend import InMemorySigningBackend
from licenses.ports.signing_backend import SignerBackendError, SigningBackend


class FailingBackend(SigningBackend):
    """Backend whose every call fails with a SignerBackendError."""

    def __init__(self, reason="transport", status_code=None):
        self.key_name = "license-signing-key"
        self.reason = reason
        self.status_code = status_code
        self.calls = []

    def _fail(self, operation):
        self.calls.append(operation)
        raise SignerBackendError(
            f"Signer {operation} failed", reason=self.reason, status_code=self.status_code
        )

    async def sign(self, payload):
        self._fail("sign")

    async def verify(self, payload, signature):
        self._fail("verify")

    async def list_keys(self):
        self._fail("list_keys")

    async def read_key(self, name):
        self._fail("read_key")

    async def health(self):
        self._fail("health")


class SlowBackend(InMemorySigningBackend):
    """In-memory backend that sleeps before answering."""

    def __init__(self, delay, private_key=None):
        super().__init__(private_key=private_key)
        self.delay = delay
        self.calls = []

    async def sign(self, payload):
        self.calls.append("sign")
        await asyncio.sleep(self.delay)
        return await super().sign(payload)

    async def verify(self, payload, signature):
        self.calls.append("verify")
        await asyncio.sleep(self.delay)
        return await super().verify(payload, signature)


class RecordingBackend(InMemorySigningBackend):
    """In-memory backend that records the payloads it is given."""

    def __init__(self, private_key=None):
        super().__init__(private_key=private_key)
        self.signed = []
        self.verified = []

    async def sign(self, payload):
        self.signed.append(payload)
        return await super().sign(payload)

    async def verify(self, payload, signature):
        self.verified.append(payload)
        return await super().verify(payload, signature)


class SignOnlyFailingBackend(RecordingBackend):
    """Backend that verifies normally but cannot sign."""

    async def sign(self, payload):
        self.signed.append(payload)
        raise SignerBackendError("Signer sign failed", reason="transport")
