"""Unit tests for Django settings configuration."""

from django.conf import settings
from django.test import SimpleTestCase, override_settings

from delivery.config import DeliveryConfig


class TestTestSettingsConfiguration(SimpleTestCase):
    """Tests for test-specific settings configuration."""

    def test_test_mode_flag_is_set(self):
        """Test that TEST_MODE flag is set to True in test settings."""
        self.assertTrue(settings.TEST_MODE)

    def test_uses_in_memory_sqlite(self):
        """Test that tests run against in-memory SQLite."""
        database = settings.DATABASES["default"]
        self.assertEqual(database["ENGINE"], "django.db.backends.sqlite3")
        self.assertEqual(database["NAME"], ":memory:")

    def test_retry_delay_disabled_for_tests(self):
        """Test retries do not sleep during tests."""
        self.assertEqual(settings.NOTIFICATION_RETRY_BASE_DELAY, 0.0)


class TestDeliveryConfigFromSettings(SimpleTestCase):
    """Tests for building DeliveryConfig from Django settings."""

    def test_reads_provider_and_relay_settings(self):
        """Test credentials and endpoints come from settings."""
        config = DeliveryConfig.from_settings()

        self.assertEqual(config.sendgrid_api_key, "test-sendgrid-key")
        self.assertEqual(config.fcm_server_key, "test-fcm-server-key")
        self.assertEqual(config.from_email, "admin@heritage.test")
        self.assertTrue(config.relay.configured)
        self.assertEqual(
            config.relay.endpoint(config.relay.email_function),
            "https://relay.heritage.test/functions/v1/heritage-send-email",
        )

    @override_settings(RELAY_BASE_URL="https://relay.heritage.test/", RELAY_API_KEY="")
    def test_relay_without_key_is_not_configured(self):
        """Test the relay needs both a URL and a key."""
        config = DeliveryConfig.from_settings()

        self.assertFalse(config.relay.configured)
        self.assertEqual(
            config.relay.endpoint("heritage-send-fcm"),
            "https://relay.heritage.test/functions/v1/heritage-send-fcm",
        )
