"""Best-effort decoding of provider response bodies.

Mercado Pago normally answers with JSON, but gateways in front of it can return
HTML or plain text. Callers get an explicit variant instead of an exception.
"""

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StructuredBody:
    data: Any

    def as_json(self) -> Any:
        return self.data


@dataclass(frozen=True)
class RawBody:
    text: str

    def as_json(self) -> Any:
        return {"raw": self.text}


ProviderBody = StructuredBody | RawBody


def parse_body(text: str) -> ProviderBody:
    """Parse text as JSON, keeping the raw text when it is not valid JSON."""

    try:
        return StructuredBody(json.loads(text))
    except ValueError:
        return RawBody(text)
