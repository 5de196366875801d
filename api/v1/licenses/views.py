"""
License API views.

These endpoints are used by callers to:
- Issue signed licenses
- Validate licenses they hold
- Renew licenses into new, re-signed licenses
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.licenses.serializers import (
    IssueLicenseRequestSerializer,
    LicenseResponseSerializer,
    LicenseValidationResponseSerializer,
    RenewLicenseRequestSerializer,
    ValidateLicenseRequestSerializer,
)
from core.domain.exceptions import InvalidRequestError
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    RenewLicenseHandler,
    ValidateLicenseHandler,
)
from licenses.application.queries.validate_license import ValidateLicenseQuery
from licenses.domain.license import License
from licenses.domain.services import LicenseLifecycleManager
from licenses.infrastructure.signer_config import get_signing_client

tracer = get_tracer(__name__)


def _lifecycle_manager() -> LicenseLifecycleManager:
    return LicenseLifecycleManager(get_signing_client())


def _validated(serializer_class, request: Request, span):
    """Run a request serializer, raising InvalidRequestError on bad input."""
    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        span.set_attribute("error", "validation_failed")
        span.set_status(Status(StatusCode.ERROR, "Validation failed"))
        raise InvalidRequestError("Request validation failed", details=serializer.errors)
    return serializer.validated_data


class IssueLicenseView(APIView):
    """View for issuing licenses."""

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License",
        description=(
            "Issue a new license for a customer. The license is signed by the "
            "key-management service and returned in full; the service keeps no copy."
        ),
        tags=["License API"],
        request=IssueLicenseRequestSerializer,
        responses={
            201: LicenseResponseSerializer,
            400: {"description": "Bad Request"},
            503: {"description": "Signing service unavailable"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a license."""
        return async_to_sync(self._handle_issue_license)(request)

    async def _handle_issue_license(self, request: Request) -> Response:
        """Async handler for issue license."""
        with tracer.start_as_current_span("issue_license") as span:
            span.set_attribute("operation", "issue_license")

            data = _validated(IssueLicenseRequestSerializer, request, span)
            span.set_attribute("modules.count", len(data["modules"]))

            handler = IssueLicenseHandler(_lifecycle_manager())
            command = IssueLicenseCommand(
                customer=data["customer"],
                modules=data["modules"],
                expires_at=data["expires_at"],
                timeout_seconds=data.get("timeout_seconds"),
            )

            result = await handler.handle(command)

            span.set_attribute("license.id", result.license_id)
            span.set_status(Status(StatusCode.OK))
            return Response(
                LicenseResponseSerializer({"license": result}).data,
                status=status.HTTP_201_CREATED,
            )


class ValidateLicenseView(APIView):
    """View for validating licenses."""

    @extend_schema(
        operation_id="validate_license",
        summary="Validate License",
        description=(
            "Check a license's signature and expiration. An invalid or expired "
            "license is reported in the response body, not as an error."
        ),
        tags=["License API"],
        request=ValidateLicenseRequestSerializer,
        responses={
            200: LicenseValidationResponseSerializer,
            400: {"description": "Bad Request"},
        },
    )
    def post(self, request: Request) -> Response:
        """Validate a license."""
        return async_to_sync(self._handle_validate_license)(request)

    async def _handle_validate_license(self, request: Request) -> Response:
        """Async handler for validate license."""
        with tracer.start_as_current_span("validate_license") as span:
            span.set_attribute("operation", "validate_license")

            data = _validated(ValidateLicenseRequestSerializer, request, span)
            license = License.from_dict(data["license"])
            span.set_attribute("license.id", license.license_id)

            handler = ValidateLicenseHandler(_lifecycle_manager())
            result = await handler.handle(
                ValidateLicenseQuery(
                    license=license,
                    timeout_seconds=data.get("timeout_seconds"),
                )
            )

            span.set_attribute("license.valid", result.valid)
            span.set_attribute("license.signature_valid", result.signature_valid)
            span.set_attribute("license.expired", result.expired)
            span.set_status(Status(StatusCode.OK))
            return Response(
                LicenseValidationResponseSerializer(result).data,
                status=status.HTTP_200_OK,
            )


class RenewLicenseView(APIView):
    """View for renewing licenses."""

    @extend_schema(
        operation_id="renew_license",
        summary="Renew License",
        description=(
            "Renew an authentic license into a new license with a new expiration. "
            "The original license is not modified; the new one records it in renewed_from."
        ),
        tags=["License API"],
        request=RenewLicenseRequestSerializer,
        responses={
            201: LicenseResponseSerializer,
            400: {"description": "Bad Request or license failed verification"},
            503: {"description": "Signing service unavailable"},
        },
    )
    def post(self, request: Request) -> Response:
        """Renew a license."""
        return async_to_sync(self._handle_renew_license)(request)

    async def _handle_renew_license(self, request: Request) -> Response:
        """Async handler for renew license."""
        with tracer.start_as_current_span("renew_license") as span:
            span.set_attribute("operation", "renew_license")

            data = _validated(RenewLicenseRequestSerializer, request, span)
            license = License.from_dict(data["license"])
            span.set_attribute("license.renewed_from", license.license_id)

            handler = RenewLicenseHandler(_lifecycle_manager())
            command = RenewLicenseCommand(
                license=license,
                new_expires_at=data["new_expires_at"],
                timeout_seconds=data.get("timeout_seconds"),
            )

            result = await handler.handle(command)

            span.set_attribute("license.id", result.license_id)
            span.set_status(Status(StatusCode.OK))
            return Response(
                LicenseResponseSerializer({"license": result}).data,
                status=status.HTTP_201_CREATED,
            )
