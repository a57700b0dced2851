"""Relay use cases shared by the HTTP routes."""

from typing import Any

from pixrelay.common.config import RelaySettings, mask_token
from pixrelay.common.logging import logger, payment_id_ctx
from pixrelay.common.metrics import webhook_events_total
from pixrelay.services.provider_adapter.client import MercadoPagoClient
from pixrelay.services.provider_adapter.schemas import result_body
from pixrelay.services.relay.schemas import PaymentCreateRequest, WebhookEvent

REDACTED_HEADERS = {"authorization", "cookie", "x-signature"}


class RelayService:
    """Shapes provider results into relay responses."""

    def __init__(self, settings: RelaySettings, provider: MercadoPagoClient) -> None:
        self.settings = settings
        self.provider = provider

    async def create_charge(self, payload: Any) -> dict[str, Any]:
        """Create a PIX charge; backs both `/pix/create` and `/qr/create`."""

        req = PaymentCreateRequest.from_payload(payload)
        result = await self.provider.create_pix_payment(
            req.amount,
            req.description,
            external_reference=req.external_reference,
            payer_email=req.payer_email,
        )
        if result.payment_id is not None:
            payment_id_ctx.set(str(result.payment_id))
        logger.info(
            "pix charge created payment_id=%s status=%s external_reference=%s",
            result.payment_id,
            result.status,
            req.external_reference,
        )
        return {"ok": True, **result_body(result)}

    async def payment_status(self, payment_id: Any) -> dict[str, Any]:
        result = await self.provider.get_payment_status(payment_id)
        payment_id_ctx.set(str(result.id if result.id is not None else payment_id))
        return result_body(result)

    def debug_env(self) -> dict[str, Any]:
        """Configuration introspection; the raw token is never included."""

        token = self.settings.access_token
        return {
            "token_configured": bool(token),
            "token_length": len(token),
            "token_masked": mask_token(token),
            "payer_email": self.settings.mp_payer_email or None,
            "webhook_url": self.settings.mp_webhook_url or None,
        }

    def record_webhook(
        self,
        method: str,
        headers: dict[str, str],
        query: dict[str, str],
        raw_body: bytes,
    ) -> WebhookEvent:
        event = WebhookEvent(
            method=method,
            headers={
                k: ("<redacted>" if k.lower() in REDACTED_HEADERS else v)
                for k, v in headers.items()
            },
            query=query,
            body=WebhookEvent.decode_body(raw_body),
        )
        webhook_events_total.labels(service=self.settings.service_name, method=method).inc()
        logger.info("webhook received event=%s", event.model_dump())
        return event
