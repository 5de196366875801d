"""
API exception handlers.

Every error leaves the API as ``{"error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    DomainException,
    SigningKeyNotFoundError,
    SigningUnavailableError,
)

logger = logging.getLogger(__name__)

# Most specific first; anything else from the domain is a bad request
DOMAIN_STATUS_CODES = (
    (SigningKeyNotFoundError, status.HTTP_404_NOT_FOUND),
    (SigningUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Render exceptions raised by API views."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _domain_error(exc, trace_id)
    elif isinstance(exc, Http404):
        response = _error_response("NOT_FOUND", "Resource not found", status.HTTP_404_NOT_FOUND)
    elif isinstance(exc, APIException):
        response = _framework_error(exc, context)
    else:
        logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
        response = _error_response(
            "INTERNAL_ERROR",
            "An internal error occurred",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Trace id set by the observability middleware, else the correlation id."""
    request = context.get("request")
    if request is None:
        return None
    return getattr(request, "trace_id", None) or getattr(request, "correlation_id", None)


def _error_response(code: str, message: str, status_code: int, **extra: Any) -> Response:
    return Response({"error": {"code": code, "message": message, **extra}}, status=status_code)


def _domain_error(exc: DomainException, trace_id: Optional[str]) -> Response:
    status_code = next(
        (code for exc_type, code in DOMAIN_STATUS_CODES if isinstance(exc, exc_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})

    extra: Dict[str, Any] = {}
    if exc.details is not None:
        extra["details"] = exc.details
    if isinstance(exc, SigningUnavailableError):
        # Lets callers decide whether to retry
        extra["reason"] = exc.reason
        extra["transient"] = exc.transient
    return _error_response(exc.code, exc.message, status_code, **extra)


def _framework_error(exc: APIException, context: Dict[str, Any]) -> Response:
    """Reshape DRF's own errors (bad JSON, wrong method) into the error envelope."""
    response = exception_handler(exc, context)
    detail = response.data.get("detail") if isinstance(response.data, dict) else None
    code = str(getattr(exc, "default_code", "api_error")).upper().replace("-", "_")
    response.data = {"error": {"code": code, "message": str(detail or exc.default_detail)}}
    return response
