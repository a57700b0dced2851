"""Error kinds surfaced by the relay and how they map to HTTP statuses."""

from typing import Any


class RelayError(Exception):
    """Base for failures that are rendered as a JSON error body."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(RelayError):
    """Required credential or setting is missing; fatal for the request only."""

    status_code = 500


class InvalidArgument(RelayError):
    """Caller-supplied input failed validation."""

    status_code = 400


class ProviderError(RelayError):
    """Mercado Pago answered with a non-success status.

    The provider's status code is preserved for error statuses; anything else
    that is not a 2xx (redirects, informational) is reported as 502.
    """

    def __init__(self, provider_status: int, payload: Any) -> None:
        status_code = provider_status if provider_status >= 400 else 502
        super().__init__("Provider request failed", status_code=status_code)
        self.provider_status = provider_status
        self.payload = payload

    def to_body(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "provider_status": self.provider_status,
            "detail": self.payload,
        }
