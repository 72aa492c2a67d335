"""Prometheus metrics helpers for HTTP and booking observability."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from time import perf_counter

from fastapi import Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

HTTP_REQUESTS_TOTAL = Counter(
    "lingomatch_http_requests_total",
    "HTTP requests served, by route template and status.",
    ["method", "path", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "lingomatch_http_request_duration_seconds",
    "Time spent serving HTTP requests.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

BOOKINGS_CREATED_TOTAL = Counter(
    "lingomatch_bookings_created_total",
    "Total number of booking rows created.",
)

BOOKING_CONFLICTS_TOTAL = Counter(
    "lingomatch_booking_conflicts_total",
    "Booking requests rejected because a slot was no longer available.",
)

SLOTS_GENERATED_TOTAL = Counter(
    "lingomatch_slots_generated_total",
    "Total number of availability slots generated by teachers.",
)


def _route_template(request: Request) -> str:
    """Label by route template so path parameters do not explode cardinality."""
    route = request.scope.get("route")
    return str(getattr(route, "path", None) or request.url.path)


def _observe(request: Request, status_code: int, elapsed_seconds: float) -> None:
    method = request.method.upper()
    path = _route_template(request)
    HTTP_REQUESTS_TOTAL.labels(method=method, path=path, status_code=str(status_code)).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(method=method, path=path).observe(elapsed_seconds)


async def instrument_http_request(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Middleware recording request count and latency; errors count as 500."""
    started_at = perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        _observe(request, 500, perf_counter() - started_at)
        raise
    _observe(request, response.status_code, perf_counter() - started_at)
    return response


def build_metrics_response() -> Response:
    """Render every registered collector in Prometheus text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
