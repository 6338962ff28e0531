"""DeliveryLogEntry model for per-recipient delivery bookkeeping.

One row exists per (user_id, notification_type, channel, recipient). A
repeated send for the same key updates that row instead of inserting a new
one, for both channels.
"""

from typing import ClassVar

from django.db import models
from django.utils import timezone

from delivery.enums import DeliveryStatus


class DeliveryLogEntry(models.Model):
    """Current delivery state for one recipient of one notification type.

    Attributes:
        user_id: Platform user the notification was for.
        notification_type: Template key that produced the message.
        channel: Delivery channel (email, push).
        recipient: Email address or device token.
        subject: Rendered subject or push title.
        content: Rendered plain-text body.
        template: Template name used for rendering.
        status: sent or failed.
        skip_reason: Why the delivery failed or was skipped.
        provider: Provider or relay that handled the last attempt.
        provider_message_id: Identifier assigned by the provider.
        provider_response: Raw provider response body, when useful.
        attempt_count: Number of dispatches recorded for this key.
        created_at: When the row was first written.
        updated_at: When the row was last written.
        sent_at: When the message was accepted by a provider.
    """

    STATUS_CHOICES: ClassVar[list[tuple[str, str]]] = [
        (DeliveryStatus.SENT.value, "Sent"),
        (DeliveryStatus.FAILED.value, "Failed"),
    ]

    user_id = models.BigIntegerField(
        db_index=True,
        help_text="User the notification was addressed to",
    )
    notification_type = models.CharField(
        max_length=100,
        help_text="Template key of the notification",
    )
    channel = models.CharField(
        max_length=20,
        help_text="Delivery channel (email, push)",
    )
    recipient = models.CharField(
        max_length=512,
        help_text="Email address or device token",
    )
    subject = models.CharField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Rendered subject or push title",
    )
    content = models.TextField(
        null=True,
        blank=True,
        help_text="Rendered plain-text content",
    )
    template = models.CharField(
        max_length=200,
        null=True,
        blank=True,
        help_text="Template used for rendering",
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        help_text="Delivery status (sent, failed)",
    )
    skip_reason = models.TextField(
        null=True,
        blank=True,
        help_text="Failure or skip reason",
    )
    provider = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Provider or relay that handled the delivery",
    )
    provider_message_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Message identifier assigned by the provider",
    )
    provider_response = models.JSONField(
        null=True,
        blank=True,
        help_text="Raw provider response body",
    )
    attempt_count = models.PositiveIntegerField(
        default=1,
        help_text="Number of dispatches recorded for this key",
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)
    sent_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        """Django model metadata."""

        db_table = "heritage_notification_log"
        managed = False
        ordering: ClassVar[list[str]] = ["-created_at"]
        constraints: ClassVar[list] = [
            models.UniqueConstraint(
                fields=["user_id", "notification_type", "channel", "recipient"],
                name="uniq_notification_log_delivery_key",
            )
        ]
        indexes: ClassVar[list] = [
            models.Index(fields=["status", "-created_at"]),
            models.Index(fields=["notification_type", "channel"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the log entry."""
        return f"{self.channel}:{self.notification_type} -> {self.status}"

    def __repr__(self) -> str:
        """Return detailed representation of the log entry."""
        return (
            f"<DeliveryLogEntry(user={self.user_id}, "
            f"type={self.notification_type}, channel={self.channel}, "
            f"status={self.status})>"
        )

    @property
    def is_sent(self) -> bool:
        """Whether the last recorded attempt was delivered."""
        return self.status == DeliveryStatus.SENT.value
