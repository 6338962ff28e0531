"""Development server for the notification engine.

The template and delivery log tables are owned by the admin console's
database, so the engine starts without checking migrations.
"""

from django.core.management.commands.runserver import Command as RunServer


class Command(RunServer):
    """Runserver variant that skips migration checks and reports transport."""

    help = "Start the notification engine development server"

    def check_migrations(self, *_args, **_kwargs):
        """Report the delivery configuration instead of checking migrations."""
        from delivery.config import DeliveryConfig  # noqa: PLC0415
        from delivery.services.transport import RuntimeEnvironment  # noqa: PLC0415

        config = DeliveryConfig.from_settings()
        environment = RuntimeEnvironment.detect(config.runtime)

        self.stdout.write(
            self.style.WARNING(
                "Skipping migration checks (notification tables are not owned here)"
            )
        )
        self.stdout.write(
            f"Runtime: {environment.name} | "
            f"SendGrid key: {'set' if config.sendgrid_api_key else 'missing'} | "
            f"FCM key: {'set' if config.fcm_server_key else 'missing'} | "
            f"Relay: {'configured' if config.relay.configured else 'not configured'}"
        )
