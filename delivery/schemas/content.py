"""Rendered, channel-specific template content."""

from delivery.enums import Channel
from delivery.schemas.base_schema_model import BaseSchemaModel


class ChannelContent(BaseSchemaModel):
    """Template content rendered for one channel.

    For email, subject/html/text are filled. For push, subject holds the
    title and text the body, with optional image and action URLs.
    """

    channel: Channel
    subject: str = ""
    text: str = ""
    html: str = ""
    image_url: str | None = None
    action_url: str | None = None
