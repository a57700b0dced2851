"""Shared fixtures: a relay app wired to a simulated Mercado Pago."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from pixrelay.common.config import RelaySettings
from pixrelay.services.relay.main import create_app

TEST_TOKEN = "APP_USR-1234567890-abcdef-secret-token-9876"


class FakeMercadoPago:
    """Records outbound requests and replays a queued response."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.status_code = 200
        self.body: object = {}
        self.text: str | None = None
        self.error: Exception | None = None

    def respond(self, status_code: int = 200, body: object = None, text: str | None = None) -> None:
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.text = text

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)

    def sent_json(self, index: int = -1) -> dict:
        return json.loads(self.calls[index].content)


def make_settings(**overrides) -> RelaySettings:
    values = {
        "mp_access_token": TEST_TOKEN,
        "mp_payer_email": "payer@example.com",
        "mp_webhook_url": "https://relay.example.com/webhook/mercadopago",
        "mp_api_base_url": "https://api.mercadopago.test",
    }
    values.update(overrides)
    return RelaySettings(_env_file=None, **values)


@pytest.fixture
def mercadopago() -> FakeMercadoPago:
    return FakeMercadoPago()


@pytest.fixture
def http_client(mercadopago: FakeMercadoPago) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url="https://api.mercadopago.test",
        transport=httpx.MockTransport(mercadopago.handler),
    )


@pytest.fixture
def make_client(http_client: httpx.AsyncClient):
    """Build a TestClient for the relay with optional settings overrides."""

    def _make(**overrides) -> TestClient:
        app = create_app(make_settings(**overrides), http_client=http_client)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
