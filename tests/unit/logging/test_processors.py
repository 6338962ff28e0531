"""Tests for custom structlog processors."""

import unittest
from unittest.mock import patch

from delivery.logging.context import clear_request_id, set_request_id
from delivery.logging.processors import (
    add_process_info,
    add_request_context,
    add_service_context,
    console_renderer,
    mask_sensitive_values,
)


class TestProcessors(unittest.TestCase):
    """Test cases for the structlog processors."""

    def tearDown(self):
        """Clean up thread-local state."""
        clear_request_id()

    def test_add_request_context_with_request_id(self):
        """Test the current request ID is added to events."""
        set_request_id("req-1")

        event = add_request_context(None, "info", {"event": "x"})

        self.assertEqual(event["request_id"], "req-1")

    def test_add_request_context_without_request_id(self):
        """Test events outside a request are left alone."""
        event = add_request_context(None, "info", {"event": "x"})

        self.assertNotIn("request_id", event)

    @patch.dict("os.environ", {"SERVICE_NAME": "engine-a", "ENVIRONMENT": "prod"})
    def test_add_service_context(self):
        """Test service name and environment come from the environment."""
        event = add_service_context(None, "info", {})

        self.assertEqual(event["service_name"], "engine-a")
        self.assertEqual(event["environment"], "prod")

    def test_add_process_info(self):
        """Test process and thread identifiers are added."""
        event = add_process_info(None, "info", {})

        self.assertIn("process_id", event)
        self.assertIn("thread_id", event)

    def test_mask_sensitive_values_truncates_tokens(self):
        """Test long tokens are shortened and short values kept."""
        event = mask_sensitive_values(
            None,
            "info",
            {"token": "abcdefghijklmnopqrstuvwxyz", "api_key": "short", "to": "x"},
        )

        self.assertEqual(event["token"], "abcdefghijkl...")
        self.assertEqual(event["api_key"], "short")
        self.assertEqual(event["to"], "x")

    def test_console_renderer_includes_fields(self):
        """Test the console line carries level, request ID and extras."""
        line = console_renderer(
            None,
            "info",
            {
                "level": "info",
                "event": "email_sent",
                "request_id": "req-9",
                "logger": "delivery.services",
                "message_id": "m-1",
                "process_id": 1,
            },
        )

        self.assertIn("INFO", line)
        self.assertIn("email_sent", line)
        self.assertIn("req-9", line)
        self.assertIn("message_id=m-1", line)
        self.assertNotIn("process_id", line)


if __name__ == "__main__":
    unittest.main()
