"""Django application configuration for delivery."""

from django.apps import AppConfig
from django.conf import settings


class DeliveryAppConfig(AppConfig):
    """Configuration class for the delivery application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "delivery"

    def ready(self) -> None:
        """Configure structured logging unless running under tests."""
        if getattr(settings, "TEST_MODE", False):
            return

        from delivery.logging import setup_logging  # noqa: PLC0415

        setup_logging()
