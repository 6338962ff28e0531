"""Component tests for the queue endpoint."""

from unittest.mock import patch

from tests.base import BaseComponentTest

URL = "/api/v1/notification-engine/notifications/queue"


class TestQueueNotificationEndpoint(BaseComponentTest):
    """Test suite for POST notifications/queue."""

    @patch("delivery.views.notification_service")
    def test_queues_dispatch(self, mock_service):
        """Test a valid dispatch request is queued and the job id returned."""
        mock_service.queue_notification.return_value = "job-1"

        response = self.post_json(
            URL,
            {
                "userId": 7,
                "templateKey": "verification_approved",
                "channel": "push",
                "recipient": "token-1",
            },
        )

        self.assertEqual(response.status_code, 202)
        self.assertEqual(response.json(), {"jobId": "job-1"})
        request = mock_service.queue_notification.call_args[0][0]
        self.assertEqual(request.recipient, "token-1")

    @patch("delivery.views.notification_service")
    def test_invalid_channel_is_rejected(self, mock_service):
        """Test unknown channels fail validation."""
        response = self.post_json(
            URL,
            {"userId": 7, "templateKey": "verification_approved", "channel": "sms"},
        )

        self.assertEqual(response.status_code, 400)
        mock_service.queue_notification.assert_not_called()
