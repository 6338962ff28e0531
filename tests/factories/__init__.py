"""Test data builders for the delivery models."""

from delivery.models import NotificationTemplate


def create_template(template_key="verification_approved", **overrides):
    """Create and save a NotificationTemplate.

    Defaults describe an active welcome email with no push-specific fields.
    """
    values = {
        "template_key": template_key,
        "template_name": "Verification Approved",
        "email_subject": "Welcome {{userName}}",
        "email_body_html": "<p>Hello {{ userName }}, your site is live.</p>",
        "email_body_text": None,
        "push_title": None,
        "push_body": None,
        "push_image_url": None,
        "push_action_url": None,
        "is_critical": False,
        "is_active": True,
    }
    values.update(overrides)
    return NotificationTemplate.objects.create(**values)
