"""Template lookup and per-channel rendering."""

import re

from django.db.models import QuerySet

import structlog

from delivery.enums import Channel
from delivery.exceptions import TemplateNotFoundError
from delivery.models import NotificationTemplate
from delivery.schemas import ChannelContent

logger = structlog.get_logger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([^{}]*?)\s*\}\}")


def substitute(template: str | None, variables: dict[str, str]) -> str:
    """Replace {{ name }} placeholders; unknown names become empty strings.

    Args:
        template: Template text (None is treated as empty)
        variables: Placeholder values

    Returns:
        The rendered text with no placeholder left behind
    """
    if not template:
        return ""
    return PLACEHOLDER_PATTERN.sub(
        lambda match: variables.get(match.group(1), ""), template
    )


def html_to_text(html: str | None) -> str:
    """Convert HTML to plain text.

    Args:
        html: HTML content

    Returns:
        Plain text version of the HTML
    """
    if not html:
        return ""

    # Remove HTML tags
    text = re.sub(r"<[^>]+>", "", html)

    # Decode common HTML entities; &amp; last so "&amp;lt;" stays "&lt;"
    text = text.replace("&nbsp;", " ")
    text = text.replace("&lt;", "<")
    text = text.replace("&gt;", ">")
    text = text.replace("&quot;", '"')
    text = text.replace("&#39;", "'")
    text = text.replace("&amp;", "&")

    # Clean up whitespace
    text = re.sub(r"\n\s*\n", "\n\n", text)
    return text.strip()


def _first_non_empty(*values: str | None) -> str:
    for value in values:
        if value:
            return value
    return ""


class TemplateResolver:
    """Reads templates from the database and renders them for a channel."""

    def resolve(self, template_key: str) -> NotificationTemplate:
        """Load an active template by key.

        Args:
            template_key: Stable template identifier

        Returns:
            The active NotificationTemplate

        Raises:
            TemplateNotFoundError: If the key is unknown or the template is
                inactive
        """
        template = NotificationTemplate.objects.filter(
            template_key=template_key
        ).first()

        if template is None:
            logger.warning("template_not_found", template_key=template_key)
            raise TemplateNotFoundError(template_key, reason="missing")

        if not template.is_active:
            logger.warning("template_inactive", template_key=template_key)
            raise TemplateNotFoundError(template_key, reason="inactive")

        return template

    def render(
        self,
        template: NotificationTemplate,
        channel: Channel | str,
        variables: dict[str, str] | None = None,
    ) -> ChannelContent:
        """Render a template for one channel.

        Push content falls back to the email fields when the push-specific
        ones are empty.

        Args:
            template: Resolved template
            channel: Target channel
            variables: Placeholder values

        Returns:
            ChannelContent for the channel
        """
        channel = Channel(channel)
        variables = variables or {}

        subject = substitute(template.email_subject, variables)
        html = substitute(template.email_body_html, variables)
        text = substitute(template.email_body_text, variables)

        if channel is Channel.EMAIL:
            return ChannelContent(
                channel=channel,
                subject=subject,
                html=html,
                text=text or html_to_text(html),
            )

        title = _first_non_empty(
            substitute(template.push_title, variables),
            subject,
            template.template_name,
            template.template_key,
        )
        body = _first_non_empty(
            substitute(template.push_body, variables),
            text,
            html_to_text(html),
        )
        return ChannelContent(
            channel=channel,
            subject=title,
            text=body,
            image_url=substitute(template.push_image_url, variables) or None,
            action_url=substitute(template.push_action_url, variables) or None,
        )

    def list_active_templates(self) -> QuerySet[NotificationTemplate]:
        """Active templates ordered by key."""
        return NotificationTemplate.objects.filter(is_active=True).order_by(
            "template_key"
        )


template_resolver = TemplateResolver()
