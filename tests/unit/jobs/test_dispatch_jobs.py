"""Tests for the dispatch background job."""

from unittest.mock import patch

from django.test import TestCase

from pydantic import ValidationError

from delivery.enums import Channel
from delivery.jobs.dispatch_jobs import dispatch_notification_job
from delivery.schemas import DeliveryResult


class TestDispatchNotificationJob(TestCase):
    """Test suite for dispatch_notification_job."""

    def setUp(self):
        """Set up test fixtures."""
        self.payload = {
            "user_id": 7,
            "template_key": "verification_approved",
            "channel": "email",
            "recipient": "asha@example.com",
            "variables": {"userName": "Asha"},
        }

    @patch("delivery.jobs.dispatch_jobs.notification_service")
    def test_runs_dispatch_and_returns_result(self, mock_service):
        """Test the job rebuilds the request and returns the result as JSON."""
        mock_service.orchestrator.dispatch.return_value = DeliveryResult(
            success=True,
            channel=Channel.EMAIL,
            recipient="asha@example.com",
            template_key="verification_approved",
            provider="sendgrid",
            attempts=1,
        )

        result = dispatch_notification_job(self.payload)

        request = mock_service.orchestrator.dispatch.call_args[0][0]
        self.assertEqual(request.user_id, 7)
        self.assertEqual(request.channel, "email")
        self.assertEqual(request.variables, {"userName": "Asha"})
        self.assertTrue(result["success"])
        self.assertEqual(result["provider"], "sendgrid")

    @patch("delivery.jobs.dispatch_jobs.notification_service")
    def test_invalid_payload_raises(self, mock_service):
        """Test a malformed payload fails the job."""
        self.payload["channel"] = "sms"

        with self.assertRaises(ValidationError):
            dispatch_notification_job(self.payload)

        mock_service.orchestrator.dispatch.assert_not_called()
