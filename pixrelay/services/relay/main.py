"""HTTP surface of the PIX relay.

Routes forward to Mercado Pago through `MercadoPagoClient` and reshape the
result. The webhook route only logs and acknowledges.
"""

import json
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pixrelay.common.config import RelaySettings
from pixrelay.common.errors import RelayError
from pixrelay.common.logging import configure_logging, logger, payment_id_ctx, request_id_ctx
from pixrelay.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
)
from pixrelay.common.startup import log_startup_config
from pixrelay.common.tracing import instrument_app, setup_tracing
from pixrelay.services.provider_adapter.client import MercadoPagoClient, build_http_client
from pixrelay.services.relay.service import RelayService

WEBHOOK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


async def _json_or_empty(request: Request):
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        return {}


def create_app(
    settings: RelaySettings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the relay app around one settings object and one outbound client.

    When `http_client` is supplied (tests inject one backed by
    `httpx.MockTransport`) the caller owns it and it is not closed on shutdown.
    """

    settings = settings or RelaySettings()
    owns_client = http_client is None
    http = http_client or build_http_client(settings)
    service = RelayService(settings, MercadoPagoClient(settings, http))

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        """Close the shared outbound client with the app lifecycle."""

        yield
        if owns_client:
            await http.aclose()

    app = FastAPI(title="PIX Relay", lifespan=lifespan)
    app.state.settings = settings
    app.state.service = service
    if settings.otel_enabled:
        instrument_app(app)

    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        """Log and measure every request; unexpected errors become a 500 body."""

        start = perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request_id_ctx.set(request_id)
        payment_id_ctx.set("")
        method = request.method
        status_code = 500
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.exception("unhandled error path=%s", request.url.path)
                response = JSONResponse(
                    status_code=500,
                    content={"error": str(exc) or exc.__class__.__name__},
                )
            status_code = response.status_code
            response.headers["X-Request-Id"] = request_id
            return response
        finally:
            elapsed = max(0.0, perf_counter() - start)
            route_obj = request.scope.get("route")
            route = getattr(route_obj, "path", None) or "<unmatched>"
            http_request_duration_seconds.labels(
                service=settings.service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=settings.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()
            logger.info(
                "request method=%s path=%s status=%s latency_ms=%.1f",
                method,
                request.url.path,
                status_code,
                elapsed * 1000,
            )

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        if exc.status_code >= 500:
            logger.error("request failed path=%s error=%s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Not found" if exc.status_code == 404 else exc.detail
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message, "path": request.url.path},
            headers=getattr(exc, "headers", None),
        )

    @app.get("/")
    def root():
        """Liveness string with no dependencies."""

        return PlainTextResponse("OK")

    @app.get("/health")
    def health():
        """Container health probe endpoint."""

        return {"ok": True}

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    @app.get("/debug/env")
    def debug_env():
        return service.debug_env()

    @app.post("/pix/create")
    async def create_pix(request: Request):
        """Create a PIX charge and return its QR payload."""

        return await service.create_charge(await _json_or_empty(request))

    @app.post("/qr/create")
    async def create_qr(request: Request):
        """Older callers' path for `/pix/create`; same contract."""

        return await service.create_charge(await _json_or_empty(request))

    @app.get("/pix/status")
    @app.get("/pix/status/")
    @app.get("/pix/status/{payment_id}")
    async def pix_status(payment_id: str = ""):
        """Fetch a fresh status snapshot for one payment."""

        return await service.payment_status(payment_id)

    @app.api_route("/webhook/mercadopago", methods=WEBHOOK_METHODS)
    @app.api_route("/webhook/mercadopago/", methods=WEBHOOK_METHODS)
    async def mercadopago_webhook(request: Request):
        """Acknowledge every notification with 200 so Mercado Pago does not retry."""

        try:
            service.record_webhook(
                request.method,
                dict(request.headers),
                dict(request.query_params),
                await request.body(),
            )
        except Exception:
            try:
                logger.exception("webhook processing failed")
            except Exception:
                pass
        return PlainTextResponse("OK", status_code=200)

    return app


def build_app() -> FastAPI:
    """Process-level setup: read settings, configure logging and tracing, build the app.

    Usable as a uvicorn factory: `uvicorn --factory pixrelay.services.relay.main:build_app`.
    """

    settings = RelaySettings()
    configure_logging(settings)
    if settings.otel_enabled:
        setup_tracing(settings)
    log_startup_config(settings)
    return create_app(settings)


def run() -> None:
    """Console entrypoint: serve the relay on the configured host and port."""

    app = build_app()
    settings = app.state.settings
    logger.info("PIX relay listening on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
