"""Result shapes produced from Mercado Pago payment resources."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class PaymentCreateResult(BaseModel):
    """Charge data handed back to the caller after a successful creation.

    Provider fields pass through unchanged; their types are not guaranteed.
    """

    model_config = ConfigDict(frozen=True)

    payment_id: Any = None
    status: Any = None
    status_detail: Any = None
    qr_code: Any = None
    qr_code_base64: Any = None
    ticket_url: Any = None
    raw: str | None = None

    @classmethod
    def from_provider(cls, data: Any) -> "PaymentCreateResult":
        if not isinstance(data, dict):
            data = {}
        poi = data.get("point_of_interaction") or {}
        tx = poi.get("transaction_data") if isinstance(poi, dict) else None
        if not isinstance(tx, dict):
            tx = {}
        return cls(
            payment_id=data.get("id"),
            status=data.get("status"),
            status_detail=data.get("status_detail"),
            qr_code=tx.get("qr_code") or None,
            qr_code_base64=tx.get("qr_code_base64") or None,
            ticket_url=tx.get("ticket_url") or None,
        )


class PaymentStatusResult(BaseModel):
    """Point-in-time snapshot of a payment, fetched fresh on every lookup."""

    model_config = ConfigDict(frozen=True)

    id: Any = None
    status: Any = None
    status_detail: Any = None
    external_reference: Any = None
    transaction_amount: Any = None
    payment_method_id: Any = None
    payer: dict[str, Any] | None = None
    raw: str | None = None

    @classmethod
    def from_provider(cls, data: Any) -> "PaymentStatusResult":
        if not isinstance(data, dict):
            data = {}
        payer = data.get("payer")
        return cls(
            id=data.get("id"),
            status=data.get("status"),
            status_detail=data.get("status_detail"),
            external_reference=data.get("external_reference"),
            transaction_amount=data.get("transaction_amount"),
            payment_method_id=data.get("payment_method_id"),
            payer=payer if isinstance(payer, dict) else None,
        )


def result_body(result: BaseModel) -> dict[str, Any]:
    """Serialize a result, keeping `raw` only when the provider sent non-JSON."""

    body = result.model_dump()
    if body.get("raw") is None:
        body.pop("raw", None)
    return body
