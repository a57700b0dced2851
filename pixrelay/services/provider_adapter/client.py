"""Outbound Mercado Pago client for PIX payments.

Each operation issues exactly one HTTP call. Provider failures are raised as
`ProviderError` and never retried here.
"""

import math
from time import perf_counter
from typing import Any
from urllib.parse import quote
from uuid import uuid4

import httpx

from pixrelay.common.config import RelaySettings
from pixrelay.common.errors import InvalidArgument, ProviderError
from pixrelay.common.logging import logger
from pixrelay.common.metrics import provider_request_duration_seconds, provider_requests_total
from pixrelay.common.payloads import ProviderBody, RawBody, parse_body
from pixrelay.services.provider_adapter.schemas import PaymentCreateResult, PaymentStatusResult

PIX_PAYMENT_METHOD = "pix"


def validate_amount(amount: Any) -> float:
    """Coerce amount to a finite positive float or raise `InvalidArgument`."""

    if isinstance(amount, bool) or amount is None:
        raise InvalidArgument("Invalid amount")
    try:
        value = float(amount)
    except (TypeError, ValueError, OverflowError):
        raise InvalidArgument("Invalid amount") from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidArgument("Invalid amount")
    return value


def validate_description(description: Any) -> str:
    if not isinstance(description, str) or not description.strip():
        raise InvalidArgument("Missing description")
    return description


def validate_payment_id(payment_id: Any) -> str:
    if payment_id is None or not str(payment_id).strip():
        raise InvalidArgument("Missing payment id")
    return str(payment_id).strip()


def build_http_client(settings: RelaySettings) -> httpx.AsyncClient:
    """Shared client reused across requests for the life of the app."""

    return httpx.AsyncClient(
        base_url=settings.mp_api_base_url,
        timeout=settings.provider_timeout_seconds,
    )


class MercadoPagoClient:
    """Translates relay calls into the Mercado Pago payments API and back."""

    def __init__(self, settings: RelaySettings, http: httpx.AsyncClient) -> None:
        self.settings = settings
        self.http = http

    async def _send(self, operation: str, method: str, path: str, **kwargs) -> ProviderBody:
        token = self.settings.require_token()
        headers = {"Authorization": f"Bearer {token}", **kwargs.pop("headers", {})}
        start = perf_counter()
        status_code = "error"
        try:
            resp = await self.http.request(method, path, headers=headers, **kwargs)
            status_code = str(resp.status_code)
        finally:
            elapsed = max(0.0, perf_counter() - start)
            provider_request_duration_seconds.labels(
                service=self.settings.service_name,
                operation=operation,
            ).observe(elapsed)
            provider_requests_total.labels(
                service=self.settings.service_name,
                operation=operation,
                status_code=status_code,
            ).inc()
            logger.info(
                "provider call operation=%s method=%s path=%s status=%s latency_ms=%.1f",
                operation,
                method,
                path,
                status_code,
                elapsed * 1000,
            )

        body = parse_body(resp.text)
        if not resp.is_success:
            logger.warning("provider rejected operation=%s status=%s", operation, resp.status_code)
            raise ProviderError(resp.status_code, body.as_json())
        return body

    async def create_pix_payment(
        self,
        amount: Any,
        description: Any,
        external_reference: str | None = None,
        payer_email: str | None = None,
    ) -> PaymentCreateResult:
        """Create a PIX charge and extract its QR payload."""

        transaction_amount = validate_amount(amount)
        description = validate_description(description)
        self.settings.require_token()
        email = self.settings.resolve_payer_email(payer_email)

        payload: dict[str, Any] = {
            "transaction_amount": transaction_amount,
            "description": description,
            "payment_method_id": PIX_PAYMENT_METHOD,
            "payer": {"email": email},
        }
        if external_reference:
            payload["external_reference"] = external_reference
        if self.settings.mp_webhook_url:
            payload["notification_url"] = self.settings.mp_webhook_url

        body = await self._send(
            "create_payment",
            "POST",
            "/v1/payments",
            json=payload,
            headers={"X-Idempotency-Key": str(uuid4())},
        )
        if isinstance(body, RawBody):
            return PaymentCreateResult(raw=body.text)
        return PaymentCreateResult.from_provider(body.data)

    async def get_payment_status(self, payment_id: Any) -> PaymentStatusResult:
        """Fetch the current state of one payment."""

        payment_id = validate_payment_id(payment_id)
        self.settings.require_token()
        body = await self._send(
            "get_payment",
            "GET",
            f"/v1/payments/{quote(payment_id, safe='')}",
        )
        if isinstance(body, RawBody):
            return PaymentStatusResult(raw=body.text)
        return PaymentStatusResult.from_provider(body.data)
