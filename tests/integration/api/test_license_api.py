"""
Integration tests for License API endpoints.
"""

from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from licenses.application.services.signing_client import SigningClient
from tests.signer_fakes import FailingBackend, SlowBackend


def _issue(api_client, **overrides):
    payload = {
        "customer": "acme",
        "modules": ["analytics", "reporting"],
        "expires_at": (timezone.now() + timedelta(days=365)).isoformat(),
    }
    payload.update(overrides)
    return api_client.post(reverse("licenses:issue-license"), payload, format="json")


@pytest.fixture
def offline_signer(monkeypatch):
    """Route license views to a signer that cannot be reached."""
    client = SigningClient(FailingBackend(reason="transport"))
    monkeypatch.setattr("api.v1.licenses.views.get_signing_client", lambda: client)
    return client


@pytest.mark.integration
class TestIssueLicenseAPI:
    """Integration tests for POST /api/v1/licenses/issue."""

    def test_issue_license_success(self, api_client):
        """Test issuing a license over HTTP."""
        response = _issue(api_client)

        assert response.status_code == 201
        license = response.json()["license"]
        assert license["customer"] == "acme"
        assert license["modules"] == ["analytics", "reporting"]
        assert license["license_id"]
        assert license["signature"]
        assert license["renewed_from"] is None
        assert "X-Correlation-ID" in response

    def test_issue_license_missing_fields(self, api_client):
        """Test incomplete requests are rejected with field errors."""
        response = api_client.post(
            reverse("licenses:issue-license"), {"customer": "acme"}, format="json"
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_REQUEST"
        assert "modules" in error["details"]
        assert "expires_at" in error["details"]

    def test_issue_license_empty_modules(self, api_client):
        """Test a license must grant at least one module."""
        response = _issue(api_client, modules=[])

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_issue_license_bad_timestamp(self, api_client):
        """Test unparseable expirations are rejected."""
        response = _issue(api_client, expires_at="next tuesday")

        assert response.status_code == 400

    def test_issue_license_signer_down(self, api_client, offline_signer):
        """Test an unreachable signer is reported as unavailable."""
        response = _issue(api_client)

        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "SIGNING_UNAVAILABLE"
        assert error["reason"] == "transport"
        assert error["transient"] is True

    def test_issue_license_timeout(self, api_client, monkeypatch):
        """Test a caller-supplied timeout bounds the signer call."""
        client = SigningClient(SlowBackend(delay=5.0), timeout_seconds=10.0)
        monkeypatch.setattr("api.v1.licenses.views.get_signing_client", lambda: client)

        response = _issue(api_client, timeout_seconds=0.1)

        assert response.status_code == 503
        assert response.json()["error"]["reason"] == "timeout"

    def test_issue_license_rejects_huge_timeout(self, api_client):
        """Test timeouts outside the accepted range are rejected."""
        response = _issue(api_client, timeout_seconds=3600)

        assert response.status_code == 400


@pytest.mark.integration
class TestValidateLicenseAPI:
    """Integration tests for POST /api/v1/licenses/validate."""

    def test_validate_issued_license(self, api_client):
        """Test a license validates exactly as it was returned."""
        license = _issue(api_client).json()["license"]

        response = api_client.post(
            reverse("licenses:validate-license"), {"license": license}, format="json"
        )

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["signature_valid"] is True
        assert body["expired"] is False
        assert body["license"]["license_id"] == license["license_id"]

    @pytest.mark.parametrize(
        "field,value",
        [
            ("customer", "someone else"),
            ("customer", "acme "),
            ("modules", ["analytics", "reporting", "enterprise"]),
            ("expires_at", "2099-01-01T00:00:00Z"),
        ],
    )
    def test_validate_tampered_license(self, api_client, field, value):
        """Test tampering is reported in the body, not as an error."""
        license = _issue(api_client).json()["license"]
        license[field] = value

        response = api_client.post(
            reverse("licenses:validate-license"), {"license": license}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["valid"] is False
        assert response.json()["signature_valid"] is False

    def test_validate_expired_license(self, api_client):
        """Test an authentic but expired license."""
        expired_at = (timezone.now() - timedelta(days=1)).isoformat()
        license = _issue(api_client, expires_at=expired_at).json()["license"]

        response = api_client.post(
            reverse("licenses:validate-license"), {"license": license}, format="json"
        )

        body = response.json()
        assert body["valid"] is False
        assert body["signature_valid"] is True
        assert body["expired"] is True

    def test_validate_without_signature(self, api_client):
        """Test a license without a signature is a bad request."""
        license = _issue(api_client).json()["license"]
        del license["signature"]

        response = api_client.post(
            reverse("licenses:validate-license"), {"license": license}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_validate_without_license(self, api_client):
        """Test an empty request is a bad request."""
        response = api_client.post(reverse("licenses:validate-license"), {}, format="json")

        assert response.status_code == 400

    def test_validate_signer_down(self, api_client, monkeypatch):
        """Test an unreachable signer fails closed."""
        license = _issue(api_client).json()["license"]
        client = SigningClient(FailingBackend())
        monkeypatch.setattr("api.v1.licenses.views.get_signing_client", lambda: client)

        response = api_client.post(
            reverse("licenses:validate-license"), {"license": license}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["valid"] is False


@pytest.mark.integration
class TestRenewLicenseAPI:
    """Integration tests for POST /api/v1/licenses/renew."""

    def test_renew_license(self, api_client):
        """Test renewing a license over HTTP."""
        license = _issue(api_client).json()["license"]
        new_expiry = (timezone.now() + timedelta(days=730)).isoformat()

        response = api_client.post(
            reverse("licenses:renew-license"),
            {"license": license, "new_expires_at": new_expiry},
            format="json",
        )

        assert response.status_code == 201
        renewed = response.json()["license"]
        assert renewed["renewed_from"] == license["license_id"]
        assert renewed["license_id"] != license["license_id"]
        assert renewed["customer"] == license["customer"]
        assert renewed["modules"] == license["modules"]

        validation = api_client.post(
            reverse("licenses:validate-license"), {"license": renewed}, format="json"
        )
        assert validation.json()["valid"] is True

    def test_renew_expired_license(self, api_client):
        """Test an authentic expired license can be renewed."""
        expired_at = (timezone.now() - timedelta(days=30)).isoformat()
        license = _issue(api_client, expires_at=expired_at).json()["license"]

        response = api_client.post(
            reverse("licenses:renew-license"),
            {
                "license": license,
                "new_expires_at": (timezone.now() + timedelta(days=365)).isoformat(),
            },
            format="json",
        )

        assert response.status_code == 201

    def test_renew_tampered_license(self, api_client):
        """Test a forged license is refused."""
        license = _issue(api_client).json()["license"]
        license["modules"] = ["everything"]

        response = api_client.post(
            reverse("licenses:renew-license"),
            {
                "license": license,
                "new_expires_at": (timezone.now() + timedelta(days=365)).isoformat(),
            },
            format="json",
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_LICENSE"
        assert error["message"] == "Cannot renew invalid license"

    def test_renew_missing_expiration(self, api_client):
        """Test renewal requires a new expiration."""
        license = _issue(api_client).json()["license"]

        response = api_client.post(
            reverse("licenses:renew-license"), {"license": license}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_renew_signer_down(self, api_client, monkeypatch):
        """Test an unreachable signer makes renewal refuse the license."""
        license = _issue(api_client).json()["license"]
        client = SigningClient(FailingBackend())
        monkeypatch.setattr("api.v1.licenses.views.get_signing_client", lambda: client)

        response = api_client.post(
            reverse("licenses:renew-license"),
            {
                "license": license,
                "new_expires_at": (timezone.now() + timedelta(days=365)).isoformat(),
            },
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_LICENSE"


@pytest.mark.integration
class TestDiagnosticsAPI:
    """Integration tests for health and signing key endpoints."""

    def test_health(self, client):
        """Test the liveness endpoint."""
        response = client.get(reverse("health"))

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_signer_health(self, client):
        """Test the signer health endpoint."""
        response = client.get(reverse("health-signer"))

        assert response.status_code == 200
        assert response.json()["signer"]["sealed"] is False

    def test_signer_health_down(self, client, monkeypatch):
        """Test the signer health endpoint reports an outage."""
        failing = SigningClient(FailingBackend())
        monkeypatch.setattr("core.views.get_signing_client", lambda: failing)

        response = client.get(reverse("health-signer"))

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_list_keys(self, api_client):
        """Test listing signing keys."""
        response = api_client.get(reverse("keys:list-keys"))

        assert response.status_code == 200
        assert response.json() == {"keys": ["license-signing-key"]}

    def test_key_detail(self, api_client):
        """Test signing key metadata."""
        response = api_client.get(
            reverse("keys:key-detail", kwargs={"key_name": "license-signing-key"})
        )

        assert response.status_code == 200
        assert response.json()["name"] == "license-signing-key"

    def test_key_detail_missing(self, api_client):
        """Test an unknown key is a 404."""
        response = api_client.get(reverse("keys:key-detail", kwargs={"key_name": "missing"}))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SIGNING_KEY_NOT_FOUND"

    def test_keys_signer_down(self, api_client, monkeypatch):
        """Test key listing reports an outage as unavailable."""
        failing = SigningClient(FailingBackend())
        monkeypatch.setattr("api.v1.keys.views.get_signing_client", lambda: failing)

        response = api_client.get(reverse("keys:list-keys"))

        assert response.status_code == 503
