"""Database models for the delivery app."""

from delivery.models.delivery_log_entry import DeliveryLogEntry
from delivery.models.notification_template import NotificationTemplate

__all__ = ["DeliveryLogEntry", "NotificationTemplate"]
