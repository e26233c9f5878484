# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP middleware: X-Request-ID propagation and per-route Prometheus metrics.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from request_desk.metrics import HTTP_ERRORS, REQUEST_COUNT, REQUEST_LATENCY

# Path segments kept verbatim in metric labels; everything else is an id.
ROUTE_SEGMENTS = frozenset({
    "api", "v1", "admin", "requests", "request-types", "assignments",
    "users", "status", "comments",
})

UNTRACKED_PATHS = frozenset({
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
})


def route_label(path: str) -> str:
    """``/api/v1/requests/ab12/status`` -> ``/api/v1/requests/{id}/status``."""
    segments = [s for s in path.split("/") if s]
    if not segments:
        return "/"
    return "/" + "/".join(s if s in ROUTE_SEGMENTS else "{id}" for s in segments)


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count, time and error-count every API call by method and route."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path in UNTRACKED_PATHS:
            return response

        route = route_label(request.url.path)
        status = str(response.status_code)
        REQUEST_COUNT.labels(method=request.method, endpoint=route, status=status).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=route).observe(
            time.perf_counter() - started
        )
        if response.status_code >= 400:
            HTTP_ERRORS.labels(method=request.method, endpoint=route, status=status).inc()
        return response
