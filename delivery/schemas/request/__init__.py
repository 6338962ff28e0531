"""Request body schemas for the HTTP API."""

from delivery.schemas.request.email_notification_request import (
    EmailNotificationRequest,
)
from delivery.schemas.request.push_notification_request import (
    PushNotificationRequest,
)

__all__ = ["EmailNotificationRequest", "PushNotificationRequest"]
