# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for the request-desk service."""
from prometheus_client import Counter, Histogram

REQUESTS_CREATED = Counter(
    "requests_created_total", "Total requests created", ["type_slug"]
)
ACCESS_DENIED = Counter(
    "request_access_denied_total", "Per-item access checks that were denied", ["policy"]
)
POLICY_MISMATCH = Counter(
    "request_policy_mismatch_total", "Unrecognised visibility policies seen by the policy engine"
)
ASSIGNMENT_CHANGES = Counter(
    "request_type_assignment_changes_total", "Assignment ledger mutations", ["action"]
)
AUTO_ASSIGNMENTS = Counter(
    "request_auto_assignments_total", "Auto-assignment outcomes at request creation", ["outcome"]
)
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]
)
HTTP_ERRORS = Counter(
    "http_errors_total", "Total HTTP errors", ["method", "endpoint", "status"]
)
