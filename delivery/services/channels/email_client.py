"""Email channel client backed by the SendGrid v3 mail API."""

from typing import Any

import structlog

from delivery.constants import PROVIDER_SENDGRID, SENDGRID_MESSAGE_ID_HEADER
from delivery.enums import Channel, ErrorKind
from delivery.exceptions import ConfigError
from delivery.schemas import DeliveryOutcome, EmailPayload
from delivery.services.channels.base_channel_client import (
    BaseChannelClient,
    extract_error_message,
    parse_json_body,
)

logger = structlog.get_logger(__name__)


class EmailChannelClient(BaseChannelClient):
    """Sends rendered emails through SendGrid or the email relay function."""

    channel = Channel.EMAIL
    provider_name = PROVIDER_SENDGRID
    provider_label = "SendGrid"

    def validate(self, payload: EmailPayload) -> None:
        """Check recipient, subject and HTML body are present.

        Raises:
            ConfigError: If any of them is empty
        """
        if not payload.to:
            raise ConfigError("Recipient email address is required", self.channel)
        if not payload.subject:
            raise ConfigError("Email subject is required", self.channel)
        if not payload.html:
            raise ConfigError("Email HTML body is required", self.channel)

    def credentials_available(self) -> bool:
        """Whether a SendGrid API key is configured."""
        return bool(self.config.sendgrid_api_key)

    def relay_function(self) -> str:
        """Name of the email relay function."""
        return self.config.relay.email_function

    def build_provider_body(self, payload: EmailPayload) -> dict[str, Any]:
        """SendGrid mail/send body; plain text part goes before HTML."""
        sender: dict[str, str] = {
            "email": payload.from_email or self.config.from_email
        }
        from_name = payload.from_name or self.config.from_name
        if from_name:
            sender["name"] = from_name

        content = []
        if payload.text:
            content.append({"type": "text/plain", "value": payload.text})
        content.append({"type": "text/html", "value": payload.html})

        return {
            "personalizations": [{"to": [{"email": payload.to}]}],
            "from": sender,
            "subject": payload.subject,
            "content": content,
        }

    def build_relay_body(self, payload: EmailPayload) -> dict[str, Any]:
        """Relay body mirroring the direct fields."""
        body: dict[str, Any] = {
            "to": payload.to,
            "subject": payload.subject,
            "html": payload.html,
            "text": payload.text,
            "from": payload.from_email or self.config.from_email or None,
            "fromName": payload.from_name or self.config.from_name or None,
        }
        return {key: value for key, value in body.items() if value is not None}

    def send_direct(self, payload: EmailPayload) -> DeliveryOutcome:
        """POST to SendGrid; the message id comes from a response header."""
        response = self._post(
            self.config.sendgrid_api_url,
            headers={"Authorization": f"Bearer {self.config.sendgrid_api_key}"},
            json_data=self.build_provider_body(payload),
        )

        if not response.ok:
            message = extract_error_message(response, self.provider_label)
            logger.error(
                "email_send_failed",
                to_email=payload.to,
                status_code=response.status_code,
                error=message,
            )
            return DeliveryOutcome.failed(
                ErrorKind.PROVIDER,
                message,
                provider=self.provider_name,
                response=parse_json_body(response),
            )

        message_id = response.headers.get(SENDGRID_MESSAGE_ID_HEADER)
        logger.info(
            "email_sent",
            to_email=payload.to,
            subject=payload.subject,
            message_id=message_id,
        )
        return DeliveryOutcome.sent(
            self.provider_name,
            message_id=message_id,
            response={"status_code": response.status_code},
        )
