"""Startup-time helpers for safe config logging."""

from pixrelay.common.config import RelaySettings, mask_token
from pixrelay.common.logging import logger


def redacted_config(settings: RelaySettings) -> dict[str, object]:
    """Settings snapshot that is safe to log or return from introspection."""

    return {
        "service": settings.service_name,
        "MP_ACCESS_TOKEN": mask_token(settings.access_token),
        "MP_PAYER_EMAIL": settings.mp_payer_email or "<unset>",
        "MP_WEBHOOK_URL": settings.mp_webhook_url or "<unset>",
        "MP_API_BASE_URL": settings.mp_api_base_url,
        "PROVIDER_TIMEOUT_SECONDS": settings.provider_timeout_seconds,
        "PORT": settings.port,
    }


def log_startup_config(settings: RelaySettings) -> None:
    """Log the redacted config and flag missing credentials early."""

    logger.info("startup_config=%s", redacted_config(settings))
    if not settings.access_token:
        logger.warning("MP_ACCESS_TOKEN missing; provider routes will answer 500")
    if not settings.mp_payer_email:
        logger.warning("MP_PAYER_EMAIL missing; create requests must supply payer_email")
