"""Environment-driven settings for the relay process.

The process builds one `RelaySettings` at startup and hands it to the app
factory, which passes it on to the provider client and route handlers.
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from pixrelay.common.errors import ConfigurationError


DEFAULT_WEBHOOK_URL = "http://localhost:3000/webhook/mercadopago"


class RelaySettings(BaseSettings):
    """Typed, immutable view of runtime configuration from environment variables."""

    service_name: str = "pix-relay"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    mp_access_token: SecretStr = SecretStr("")
    mp_payer_email: str = ""
    mp_webhook_url: str = DEFAULT_WEBHOOK_URL
    mp_api_base_url: str = "https://api.mercadopago.com"
    provider_timeout_seconds: float = 10.0
    otel_enabled: bool = False
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @property
    def access_token(self) -> str:
        return self.mp_access_token.get_secret_value()

    def require_token(self) -> str:
        """Return the access token or fail before any provider call is attempted."""

        token = self.access_token
        if not token:
            raise ConfigurationError("MP_ACCESS_TOKEN missing")
        return token

    def resolve_payer_email(self, override: str | None = None) -> str:
        """Per-request override wins over the configured payer email."""

        email = (override or "").strip() or self.mp_payer_email.strip()
        if not email:
            raise ConfigurationError("MP_PAYER_EMAIL missing")
        return email


def mask_token(token: str | None) -> str:
    """Redacted token view: short prefix and suffix only, never the full value."""

    if not token:
        return "MISSING"
    if len(token) > 8:
        return f"{token[:4]}...{token[-4:]}"
    return "SET"
