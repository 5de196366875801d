"""
Prometheus metrics for the license authority.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
)

licenses_renewed_total = Counter(
    "licenses_renewed_total",
    "Total licenses renewed",
)

license_renewals_rejected_total = Counter(
    "license_renewals_rejected_total",
    "Total renewals refused because the license did not verify",
)

license_validations_total = Counter(
    "license_validations_total",
    "Total license validations by outcome",
    ["outcome"],
)

# Signer metrics
signer_requests_total = Counter(
    "signer_requests_total",
    "Total calls to the key-management signer",
    ["operation", "status"],
)

signer_request_duration_seconds = Histogram(
    "signer_request_duration_seconds",
    "Signer call duration in seconds",
    ["operation"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
)
