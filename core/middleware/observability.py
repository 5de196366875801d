"""
Observability middleware.

Correlates every API call with a request id and the active trace, emits one
structured log line per request and feeds the HTTP Prometheus metrics.
"""

import logging
import time
import uuid
from typing import Any, Callable, Dict

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id

from core.metrics import http_request_duration_seconds, http_requests_total

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _outcome(status_code: int) -> str:
    if status_code >= 500:
        return "server_error"
    if status_code >= 400:
        return "client_error"
    return "success"


def _endpoint(request: HttpRequest) -> str:
    """
    Metric label for the matched URL pattern.

    Uses the route rather than the raw path, so ``/api/v1/keys/<name>``
    stays a single series however many key names are probed.
    """
    match = getattr(request, "resolver_match", None)
    if match is not None and match.route:
        return "/" + match.route
    return "unmatched"


class ObservabilityMiddleware:
    """
    Middleware for request observability.

    A caller-supplied ``X-Correlation-ID`` is kept so a client can follow
    one license operation through the logs; otherwise a new id is minted.
    The id, trace id and request duration are echoed back as headers.
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Wrap the request with correlation, logging and metrics."""
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore
        context = self._trace_context(request)
        context["correlation_id"] = correlation_id

        logger.info(
            "%s %s started",
            request.method,
            request.path,
            extra={**context, "method": request.method, "path": request.path},
        )

        started = time.monotonic()
        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "%s %s raised %s",
                request.method,
                request.path,
                type(e).__name__,
                extra={**context, "elapsed_ms": _elapsed_ms(started)},
                exc_info=True,
            )
            raise

        elapsed = time.monotonic() - started
        outcome = _outcome(response.status_code)
        endpoint = _endpoint(request)

        http_requests_total.labels(
            method=request.method, endpoint=endpoint, status_code=response.status_code
        ).inc()
        http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(
            elapsed
        )

        level = {"server_error": logging.ERROR, "client_error": logging.WARNING}.get(
            outcome, logging.INFO
        )
        logger.log(
            level,
            "%s %s -> %s",
            request.method,
            request.path,
            response.status_code,
            extra={
                **context,
                "endpoint": endpoint,
                "status_code": response.status_code,
                "request_status": outcome,
                "elapsed_ms": round(elapsed * 1000, 2),
            },
        )

        response[CORRELATION_HEADER] = correlation_id
        response["X-Request-Status"] = outcome
        response["X-Request-Duration"] = f"{elapsed:.3f}"
        if "trace_id" in context:
            response["X-Trace-ID"] = context["trace_id"]
        return response

    @staticmethod
    def _trace_context(request: HttpRequest) -> Dict[str, Any]:
        """Trace and span id of the active span, if tracing is on."""
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return {}
        trace_id = format_trace_id(span_context.trace_id)
        request.trace_id = trace_id  # type: ignore
        return {"trace_id": trace_id, "span_id": format_span_id(span_context.span_id)}


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 2)
