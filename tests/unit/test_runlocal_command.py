"""Tests for the runlocal management command."""

from io import StringIO

from django.test import SimpleTestCase, override_settings

from delivery.management.commands.runlocal import Command


class TestRunLocalCommand(SimpleTestCase):
    """Test suite for the runlocal command."""

    def test_check_migrations_reports_configuration(self):
        """Test the command prints the transport setup instead of migrating."""
        out = StringIO()
        command = Command(stdout=out)

        command.check_migrations()

        output = out.getvalue()
        self.assertIn("Skipping migration checks", output)
        self.assertIn("Runtime: server", output)
        self.assertIn("SendGrid key: set", output)
        self.assertIn("Relay: configured", output)

    @override_settings(FCM_SERVER_KEY="", RELAY_API_KEY="")
    def test_reports_missing_credentials(self):
        """Test missing credentials are called out."""
        out = StringIO()

        Command(stdout=out).check_migrations()

        self.assertIn("FCM key: missing", out.getvalue())
        self.assertIn("Relay: not configured", out.getvalue())
