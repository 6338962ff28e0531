"""Unit tests for RequestIDMiddleware."""

import unittest
import uuid

from django.http import HttpRequest, HttpResponse

from delivery.constants import REQUEST_ID_HEADER
from delivery.logging.context import get_request_id
from delivery.middleware.request_id import RequestIDMiddleware


class TestRequestIDMiddleware(unittest.TestCase):
    """Test cases for RequestIDMiddleware."""

    def setUp(self):
        """Set up test fixtures."""
        self.seen_ids = []

        def get_response(_request):
            self.seen_ids.append(get_request_id())
            return HttpResponse("OK")

        self.middleware = RequestIDMiddleware(get_response)

    def _create_request(self, headers=None):
        """Helper to create a test request."""
        request = HttpRequest()
        request.method = "POST"
        request.path = "/api/v1/notification-engine/notifications/email"
        for key, value in (headers or {}).items():
            request.META[f"HTTP_{key.upper().replace('-', '_')}"] = value
        return request

    def test_generates_request_id_when_not_present(self):
        """Test that middleware generates a UUID when no request ID is provided."""
        request = self._create_request()
        response = self.middleware(request)

        uuid.UUID(request.request_id)
        self.assertEqual(response[REQUEST_ID_HEADER], request.request_id)

    def test_uses_existing_request_id(self):
        """Test that middleware reuses the caller's X-Request-ID header."""
        request = self._create_request(headers={REQUEST_ID_HEADER: "approval-77"})

        response = self.middleware(request)

        self.assertEqual(request.request_id, "approval-77")
        self.assertEqual(response[REQUEST_ID_HEADER], "approval-77")

    def test_request_id_visible_to_view_and_cleared_after(self):
        """Test the ID is set while the view runs and cleared afterwards."""
        request = self._create_request(headers={REQUEST_ID_HEADER: "approval-78"})

        self.middleware(request)

        self.assertEqual(self.seen_ids, ["approval-78"])
        self.assertIsNone(get_request_id())

    def test_clears_request_id_when_view_raises(self):
        """Test thread-local state is cleaned up on exceptions."""

        def failing_response(_request):
            raise RuntimeError("view failed")

        middleware = RequestIDMiddleware(failing_response)

        with self.assertRaises(RuntimeError):
            middleware(self._create_request())

        self.assertIsNone(get_request_id())


if __name__ == "__main__":
    unittest.main()
