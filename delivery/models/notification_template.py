"""NotificationTemplate model for stored message templates.

Templates are authored through the admin console; the engine only reads
them. Placeholders use the {{ name }} syntax and are filled at send time.
"""

from typing import ClassVar

from django.db import models


class NotificationTemplate(models.Model):
    """Channel-agnostic template keyed by a stable template_key.

    Email fields are mandatory; push fields are optional and fall back to
    the email content when empty.

    Attributes:
        template_key: Stable identifier callers use to select the template.
        template_name: Human readable name, last-resort push title.
        email_subject: Subject line template.
        email_body_html: HTML body template.
        email_body_text: Optional plain-text body template.
        push_title: Optional push title template.
        push_body: Optional push body template.
        push_image_url: Optional image URL for push notifications.
        push_action_url: Optional click-action URL or deep link.
        is_critical: Critical notifications bypass user opt-outs upstream.
        is_active: Only active templates can be resolved.
    """

    template_key = models.CharField(
        max_length=100,
        unique=True,
        help_text="Stable identifier used to look up the template",
    )
    template_name = models.CharField(
        max_length=200,
        help_text="Display name of the template",
    )
    email_subject = models.CharField(
        max_length=500,
        help_text="Email subject template",
    )
    email_body_html = models.TextField(
        help_text="Email HTML body template",
    )
    email_body_text = models.TextField(
        null=True,
        blank=True,
        help_text="Email plain-text body template",
    )
    push_title = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Push notification title template",
    )
    push_body = models.TextField(
        null=True,
        blank=True,
        help_text="Push notification body template",
    )
    push_image_url = models.CharField(
        max_length=1000,
        null=True,
        blank=True,
        help_text="Push notification image URL",
    )
    push_action_url = models.CharField(
        max_length=1000,
        null=True,
        blank=True,
        help_text="Push notification click action",
    )
    is_critical = models.BooleanField(
        default=False,
        help_text="Whether the notification is critical",
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Only active templates are resolvable",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "heritage_notification_templates"
        managed = False
        ordering: ClassVar[list[str]] = ["template_name"]

    def __str__(self) -> str:
        """Return string representation of the template."""
        return f"{self.template_name} ({self.template_key})"

    def __repr__(self) -> str:
        """Return detailed representation of the template."""
        return (
            f"<NotificationTemplate(key={self.template_key}, "
            f"active={self.is_active}, critical={self.is_critical})>"
        )
