"""Prometheus metric definitions for the relay."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)
provider_requests_total = Counter(
    "provider_requests_total",
    "Outbound Mercado Pago calls",
    ["service", "operation", "status_code"],
)
provider_request_duration_seconds = Histogram(
    "provider_request_duration_seconds",
    "Outbound Mercado Pago call duration seconds",
    ["service", "operation"],
)
webhook_events_total = Counter(
    "webhook_events_total",
    "Webhook notifications received",
    ["service", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
