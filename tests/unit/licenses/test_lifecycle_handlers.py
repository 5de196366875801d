"""
Unit tests for license application handlers and their events.
"""
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.events import EventHandler
from core.domain.exceptions import InvalidLicenseError
from core.infrastructure.event_handlers import AuditLogEventHandler, register_event_handlers
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    RenewLicenseHandler,
    ValidateLicenseHandler,
)
from licenses.application.queries.validate_license import ValidateLicenseQuery
from licenses.domain.events import LicenseIssued, LicenseRenewed
from licenses.domain.license import License

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class CollectingHandler(EventHandler):
    """Event handler that keeps every event it sees."""

    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


class ExplodingHandler(EventHandler):
    """Event handler that always fails."""

    async def handle(self, event):
        raise RuntimeError("handler failed")


@pytest.fixture
def collected(clean_event_bus):
    """Fixture subscribing a collecting handler to license events."""
    handler = CollectingHandler()
    clean_event_bus.subscribe(LicenseIssued, handler)
    clean_event_bus.subscribe(LicenseRenewed, handler)
    return handler.events


@pytest.mark.asyncio
class TestIssueLicenseHandler:
    """Tests for IssueLicenseHandler."""

    async def test_issue_license_success(self, manager, collected):
        """Test issuing through the handler."""
        handler = IssueLicenseHandler(manager)

        result = await handler.handle(
            IssueLicenseCommand(
                customer="acme",
                modules=["a", "b"],
                expires_at=NOW + timedelta(days=365),
            )
        )

        assert isinstance(result, LicenseDTO)
        assert result.customer == "acme"
        assert result.modules == ["a", "b"]
        assert result.signature
        assert len(collected) == 1
        assert isinstance(collected[0], LicenseIssued)
        assert collected[0].license_id == result.license_id
        assert collected[0].customer == "acme"

    async def test_failing_event_handler_does_not_fail_issue(self, manager, clean_event_bus):
        """Test audit failures never undo an issued license."""
        clean_event_bus.subscribe(LicenseIssued, ExplodingHandler())
        handler = IssueLicenseHandler(manager)

        result = await handler.handle(
            IssueLicenseCommand(customer="acme", modules=["a"], expires_at=NOW)
        )

        assert result.signature


@pytest.mark.asyncio
class TestValidateLicenseHandler:
    """Tests for ValidateLicenseHandler."""

    async def test_validate_valid(self, manager):
        """Test validating an authentic license."""
        license = await manager.issue("acme", ["a"], NOW + timedelta(days=1))

        result = await ValidateLicenseHandler(manager).handle(ValidateLicenseQuery(license=license))

        assert result.valid is True
        assert result.license.license_id == license.license_id

    async def test_validate_expired(self, manager, clock):
        """Test validating an expired license."""
        license = await manager.issue("acme", ["a"], NOW + timedelta(days=1))
        clock.advance(days=2)

        result = await ValidateLicenseHandler(manager).handle(ValidateLicenseQuery(license=license))

        assert result.valid is False
        assert result.signature_valid is True
        assert result.expired is True

    async def test_validate_bad_signature(self, manager):
        """Test validating a tampered license."""
        license = await manager.issue("acme", ["a"], NOW + timedelta(days=1))
        tampered = replace(license, customer="someone else")

        result = await ValidateLicenseHandler(manager).handle(ValidateLicenseQuery(license=tampered))

        assert result.valid is False
        assert result.signature_valid is False


@pytest.mark.asyncio
class TestRenewLicenseHandler:
    """Tests for RenewLicenseHandler."""

    async def test_renew_publishes_event(self, manager, collected):
        """Test renewal through the handler records lineage."""
        license = await manager.issue("acme", ["a"], NOW + timedelta(days=1))
        new_expiry = NOW + timedelta(days=400)

        result = await RenewLicenseHandler(manager).handle(
            RenewLicenseCommand(license=license, new_expires_at=new_expiry)
        )

        assert result.renewed_from == license.license_id
        assert result.expires_at == new_expiry
        renewed_events = [e for e in collected if isinstance(e, LicenseRenewed)]
        assert len(renewed_events) == 1
        assert renewed_events[0].renewed_from == license.license_id
        assert renewed_events[0].new_expiration == new_expiry

    async def test_renew_invalid_license(self, manager, collected):
        """Test rejected renewals raise and publish nothing."""
        license = await manager.issue("acme", ["a"], NOW + timedelta(days=1))
        tampered = replace(license, expires_at=NOW + timedelta(days=9999))

        with pytest.raises(InvalidLicenseError):
            await RenewLicenseHandler(manager).handle(
                RenewLicenseCommand(license=tampered, new_expires_at=NOW + timedelta(days=400))
            )

        assert not any(isinstance(e, LicenseRenewed) for e in collected)


@pytest.mark.asyncio
class TestAuditLog:
    """Tests for the audit log event handler."""

    async def test_audit_log_for_renewal(self, caplog):
        """Test renewals are logged with their predecessor."""
        event = LicenseRenewed(
            license_id="lic-0002", renewed_from="lic-0001", new_expiration=NOW
        )

        with caplog.at_level("INFO", logger="core.infrastructure.event_handlers"):
            await AuditLogEventHandler().handle(event)

        record = caplog.records[-1]
        assert "LicenseRenewed" in record.getMessage()
        assert record.renewed_from == "lic-0001"
        assert record.aggregate_id == "lic-0002"

    async def test_audit_log_for_issue(self, caplog):
        """Test issues are logged with their customer."""
        event = LicenseIssued(license_id="lic-0001", customer="acme", expires_at=NOW)

        with caplog.at_level("INFO", logger="core.infrastructure.event_handlers"):
            await AuditLogEventHandler().handle(event)

        assert caplog.records[-1].customer == "acme"


class TestEventRegistration:
    """Tests for event handler wiring and event serialization."""

    def test_register_event_handlers_is_idempotent(self, clean_event_bus):
        """Test registering twice does not double-log events."""
        register_event_handlers()
        register_event_handlers()

        assert len(clean_event_bus._handlers[LicenseIssued]) == 1
        assert len(clean_event_bus._handlers[LicenseRenewed]) == 1

    def test_event_to_dict(self):
        """Test event serialization."""
        event = LicenseIssued(license_id="lic-0001", customer="acme", expires_at=NOW, occurred_at=NOW)

        data = event.to_dict()

        assert data["event_type"] == "LicenseIssued"
        assert data["aggregate_id"] == "lic-0001"
        assert data["occurred_at"] == NOW.isoformat()


def test_dto_from_entity():
    """Test DTOs copy every license field."""
    license = License(
        license_id="lic-0002",
        customer="acme",
        modules=["a"],
        issued_at=NOW,
        expires_at=NOW,
        renewed_from="lic-0001",
        signature="sig",
    )

    dto = LicenseDTO.from_entity(license)

    assert dto.modules == ["a"]
    assert dto.renewed_from == "lic-0001"
    assert dto.signature == "sig"
