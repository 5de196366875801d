"""
Pytest configuration and shared fixtures.
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from core.infrastructure.events import event_bus
from licenses.application.services.signing_client import SigningClient
from licenses.domain.services import LicenseLifecycleManager
from licenses.infrastructure.signer_config import get_signing_client
from tests.signer_fakes import FailingBackend, RecordingBackend, SlowBackend

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class MutableClock:
    """Clock whose time can be moved by tests."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    """Fixture for a controllable clock starting at FIXED_NOW."""
    return MutableClock(FIXED_NOW)


@pytest.fixture
def id_factory():
    """Fixture producing predictable license identifiers."""
    counter = itertools.count(1)
    return lambda: f"lic-{next(counter):04d}"


@pytest.fixture
def memory_backend():
    """Fixture for an in-memory Ed25519 backend."""
    return RecordingBackend()


@pytest.fixture
def signing_client(memory_backend):
    """Fixture for a SigningClient over the in-memory backend."""
    return SigningClient(memory_backend, timeout_seconds=2.0)


@pytest.fixture
def manager(signing_client, clock, id_factory):
    """Fixture for a LicenseLifecycleManager with a fixed clock."""
    return LicenseLifecycleManager(signing_client, clock=clock, id_factory=id_factory)


@pytest.fixture
def failing_backend():
    """Fixture for a backend that is unreachable."""
    return FailingBackend()


@pytest.fixture
def slow_backend():
    """Fixture for a backend slower than any test timeout."""
    return SlowBackend(delay=5.0)


@pytest.fixture
def expires_next_year():
    """Fixture for an expiration a year after FIXED_NOW."""
    return FIXED_NOW + timedelta(days=365)


@pytest.fixture(autouse=True)
def fresh_signing_client():
    """Drop the cached process-wide signing client around each test."""
    get_signing_client.cache_clear()
    yield
    get_signing_client.cache_clear()


@pytest.fixture
def clean_event_bus():
    """Fixture for an event bus with no subscribers."""
    event_bus.clear()
    yield event_bus
    event_bus.clear()


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
