"""Inbound request shapes for relay endpoints."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict

from pixrelay.common.errors import InvalidArgument
from pixrelay.services.provider_adapter.client import validate_amount, validate_description


class PaymentCreateRequest(BaseModel):
    """Payload accepted by `POST /pix/create` and `POST /qr/create`."""

    model_config = ConfigDict(frozen=True)

    amount: float
    description: str
    external_reference: str | None = None
    payer_email: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "PaymentCreateRequest":
        """Validate a decoded JSON body, raising `InvalidArgument` on bad input.

        Non-object bodies are treated as empty, so they fail on the amount.
        """

        if not isinstance(payload, dict):
            payload = {}
        amount = validate_amount(payload.get("amount"))
        description = validate_description(payload.get("description"))
        reference = payload.get("external_reference")
        if reference is not None and (
            isinstance(reference, bool) or not isinstance(reference, (str, int))
        ):
            raise InvalidArgument("Invalid external_reference")
        payer_email = payload.get("payer_email")
        return cls(
            amount=amount,
            description=description,
            external_reference=str(reference) if reference not in (None, "") else None,
            payer_email=payer_email if isinstance(payer_email, str) and payer_email else None,
        )


class WebhookEvent(BaseModel):
    """Opaque provider notification; logged and discarded."""

    method: str
    headers: dict[str, str]
    query: dict[str, str]
    body: Any = None

    @staticmethod
    def decode_body(raw: bytes) -> Any:
        if not raw:
            return None
        text = raw.decode("utf-8", errors="replace")
        try:
            return json.loads(text)
        except ValueError:
            return text
