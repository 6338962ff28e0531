"""Channel clients for email and push delivery."""

from delivery.services.channels.base_channel_client import (
    BaseChannelClient,
    extract_error_message,
    is_fallback_error,
)
from delivery.services.channels.email_client import EmailChannelClient
from delivery.services.channels.push_client import PushChannelClient

__all__ = [
    "BaseChannelClient",
    "EmailChannelClient",
    "PushChannelClient",
    "extract_error_message",
    "is_fallback_error",
]
