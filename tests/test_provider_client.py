"""Unit tests for the Mercado Pago client against a mocked transport."""

import asyncio

import httpx
import pytest

from pixrelay.common.errors import ConfigurationError, InvalidArgument, ProviderError
from pixrelay.services.provider_adapter.client import MercadoPagoClient, validate_amount
from tests.conftest import TEST_TOKEN, make_settings

PIX_RESPONSE = {
    "id": 123,
    "status": "pending",
    "status_detail": "pending_waiting_transfer",
    "point_of_interaction": {
        "transaction_data": {
            "qr_code": "00020126580014br.gov.bcb.pix",
            "qr_code_base64": "iVBORw0KGgo=",
            "ticket_url": "https://www.mercadopago.com.br/payments/123/ticket",
        }
    },
}


def make_provider(http_client, **overrides) -> MercadoPagoClient:
    return MercadoPagoClient(make_settings(**overrides), http_client)


def test_create_sends_pix_payment(mercadopago, http_client):
    mercadopago.respond(201, PIX_RESPONSE)
    provider = make_provider(http_client)

    result = asyncio.run(provider.create_pix_payment(10.5, "Lavagem", external_reference="order-7"))

    assert len(mercadopago.calls) == 1
    sent = mercadopago.calls[0]
    assert sent.method == "POST"
    assert sent.url.path == "/v1/payments"
    assert sent.headers["authorization"] == f"Bearer {TEST_TOKEN}"
    assert sent.headers["x-idempotency-key"]
    assert mercadopago.sent_json() == {
        "transaction_amount": 10.5,
        "description": "Lavagem",
        "payment_method_id": "pix",
        "payer": {"email": "payer@example.com"},
        "external_reference": "order-7",
        "notification_url": "https://relay.example.com/webhook/mercadopago",
    }
    assert result.payment_id == 123
    assert result.status == "pending"
    assert result.status_detail == "pending_waiting_transfer"
    assert result.qr_code == "00020126580014br.gov.bcb.pix"
    assert result.qr_code_base64 == "iVBORw0KGgo="
    assert result.ticket_url.endswith("/ticket")


def test_each_create_gets_a_fresh_idempotency_key(mercadopago, http_client):
    mercadopago.respond(201, PIX_RESPONSE)
    provider = make_provider(http_client)

    asyncio.run(provider.create_pix_payment(1, "a"))
    asyncio.run(provider.create_pix_payment(1, "a"))

    keys = {call.headers["x-idempotency-key"] for call in mercadopago.calls}
    assert len(keys) == 2


def test_optional_fields_are_omitted(mercadopago, http_client):
    mercadopago.respond(201, PIX_RESPONSE)
    provider = make_provider(http_client, mp_webhook_url="")

    asyncio.run(provider.create_pix_payment(3, "desc", payer_email="buyer@example.com"))

    sent = mercadopago.sent_json()
    assert "external_reference" not in sent
    assert "notification_url" not in sent
    assert sent["payer"] == {"email": "buyer@example.com"}


def test_missing_qr_fields_become_none(mercadopago, http_client):
    mercadopago.respond(201, {"id": 5, "status": "pending", "point_of_interaction": {}})
    provider = make_provider(http_client)

    result = asyncio.run(provider.create_pix_payment(3, "desc"))

    assert result.payment_id == 5
    assert result.qr_code is None
    assert result.qr_code_base64 is None
    assert result.ticket_url is None


def test_non_json_success_keeps_raw_text(mercadopago, http_client):
    mercadopago.respond(201, text="created")
    provider = make_provider(http_client)

    result = asyncio.run(provider.create_pix_payment(3, "desc"))

    assert result.raw == "created"
    assert result.payment_id is None


def test_provider_error_is_propagated(mercadopago, http_client):
    mercadopago.respond(400, {"message": "invalid payer email", "status": 400})
    provider = make_provider(http_client)

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.create_pix_payment(3, "desc"))

    assert exc_info.value.status_code == 400
    assert exc_info.value.payload == {"message": "invalid payer email", "status": 400}
    assert len(mercadopago.calls) == 1


def test_provider_error_with_non_json_body(mercadopago, http_client):
    mercadopago.respond(503, text="upstream unavailable")
    provider = make_provider(http_client)

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.get_payment_status("77"))

    assert exc_info.value.status_code == 503
    assert exc_info.value.payload == {"raw": "upstream unavailable"}


@pytest.mark.parametrize("amount", [0, -5, "abc", None, True, float("nan"), float("inf"), 10**400])
def test_invalid_amount_never_calls_provider(mercadopago, http_client, amount):
    provider = make_provider(http_client)

    with pytest.raises(InvalidArgument):
        asyncio.run(provider.create_pix_payment(amount, "desc"))

    assert mercadopago.calls == []


def test_numeric_string_amount_is_accepted():
    assert validate_amount("2.50") == 2.5


def test_missing_token_never_calls_provider(mercadopago, http_client):
    provider = make_provider(http_client, mp_access_token="")

    with pytest.raises(ConfigurationError):
        asyncio.run(provider.create_pix_payment(1, "desc"))
    with pytest.raises(ConfigurationError):
        asyncio.run(provider.get_payment_status("1"))

    assert mercadopago.calls == []


def test_status_lookup_quotes_id(mercadopago, http_client):
    mercadopago.respond(200, {"id": 9, "status": "approved", "transaction_amount": 12})
    provider = make_provider(http_client)

    result = asyncio.run(provider.get_payment_status("9/x"))

    assert mercadopago.calls[0].method == "GET"
    assert mercadopago.calls[0].url.raw_path == b"/v1/payments/9%2Fx"
    assert result.status == "approved"
    assert result.transaction_amount == 12


@pytest.mark.parametrize("payment_id", ["", "   ", None])
def test_blank_status_id_is_rejected(mercadopago, http_client, payment_id):
    provider = make_provider(http_client)

    with pytest.raises(InvalidArgument):
        asyncio.run(provider.get_payment_status(payment_id))

    assert mercadopago.calls == []


def test_transport_errors_propagate(mercadopago, http_client):
    mercadopago.error = httpx.ConnectError("connection refused")
    provider = make_provider(http_client)

    with pytest.raises(httpx.ConnectError):
        asyncio.run(provider.get_payment_status("1"))
