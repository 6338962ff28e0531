"""Provider, relay and delivery tuning configuration.

Values come from Django settings, which read them from the environment.
Clients receive a DeliveryConfig instead of reading settings directly, so
tests can build one with any combination of credentials.
"""

from django.conf import settings

from pydantic import BaseModel, ConfigDict

from delivery.constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_BASE_DELAY,
)


class RelayConfig(BaseModel):
    """Location and credential of the relay edge functions."""

    model_config = ConfigDict(frozen=True)

    base_url: str = ""
    api_key: str = ""
    email_function: str = "heritage-send-email"
    push_function: str = "heritage-send-fcm"

    @property
    def configured(self) -> bool:
        """Whether the relay can be called at all."""
        return bool(self.base_url and self.api_key)

    def endpoint(self, function_name: str) -> str:
        """Full URL of a relay function."""
        return f"{self.base_url.rstrip('/')}/functions/v1/{function_name}"


class DeliveryConfig(BaseModel):
    """Everything the channel clients and orchestrator need to run."""

    model_config = ConfigDict(frozen=True)

    sendgrid_api_key: str = ""
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    from_email: str = ""
    from_name: str = ""
    fcm_server_key: str = ""
    fcm_api_url: str = "https://fcm.googleapis.com/fcm/send"
    relay: RelayConfig = RelayConfig()
    runtime: str = ""
    force_relay: bool = False
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY
    fanout_max_workers: int = 8

    @classmethod
    def from_settings(cls) -> "DeliveryConfig":
        """Build the configuration from Django settings."""
        return cls(
            sendgrid_api_key=settings.SENDGRID_API_KEY,
            sendgrid_api_url=settings.SENDGRID_API_URL,
            from_email=settings.SENDGRID_FROM_EMAIL,
            from_name=settings.SENDGRID_FROM_NAME,
            fcm_server_key=settings.FCM_SERVER_KEY,
            fcm_api_url=settings.FCM_API_URL,
            relay=RelayConfig(
                base_url=settings.RELAY_BASE_URL,
                api_key=settings.RELAY_API_KEY,
                email_function=settings.RELAY_EMAIL_FUNCTION,
                push_function=settings.RELAY_PUSH_FUNCTION,
            ),
            runtime=settings.NOTIFICATION_RUNTIME,
            force_relay=settings.NOTIFICATION_FORCE_RELAY,
            http_timeout=settings.NOTIFICATION_HTTP_TIMEOUT,
            max_attempts=settings.NOTIFICATION_MAX_ATTEMPTS,
            retry_base_delay=settings.NOTIFICATION_RETRY_BASE_DELAY,
            fanout_max_workers=settings.NOTIFICATION_FANOUT_MAX_WORKERS,
        )
