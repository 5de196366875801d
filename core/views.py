"""
Core views for health checks and system status.
"""

import logging

from asgiref.sync import async_to_sync
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from core.domain.exceptions import SigningUnavailableError
from licenses.infrastructure.signer_config import get_signing_client

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint."""

    def get(self, _request):
        """Return service health status."""
        return JsonResponse({"status": "healthy", "service": "license-authority"})


@method_decorator(csrf_exempt, name="dispatch")
class HealthSignerView(View):
    """Signer health check endpoint."""

    def get(self, _request):
        """Check key-management signer connectivity."""
        try:
            signer_status = async_to_sync(get_signing_client().health)()
        except SigningUnavailableError as e:
            logger.warning("Signer health check failed: %s", e.message)
            return JsonResponse(
                {"status": "unhealthy", "signer": "unavailable", "error": e.message},
                status=503,
            )
        return JsonResponse({"status": "healthy", "signer": signer_status})
