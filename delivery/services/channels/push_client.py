"""Push channel client backed by the FCM legacy HTTP endpoint."""

from typing import Any

import structlog

from delivery.constants import PROVIDER_FCM
from delivery.enums import Channel, ErrorKind
from delivery.exceptions import ConfigError
from delivery.schemas import DeliveryOutcome, PushPayload
from delivery.services.channels.base_channel_client import (
    BaseChannelClient,
    extract_error_message,
    parse_json_body,
)

logger = structlog.get_logger(__name__)


def _first_result(body: Any) -> dict[str, Any]:
    """First entry of an FCM results array, or an empty dict."""
    if isinstance(body, dict):
        results = body.get("results")
        if isinstance(results, list) and results and isinstance(results[0], dict):
            return results[0]
    return {}


class PushChannelClient(BaseChannelClient):
    """Sends push notifications to one device token via FCM or the relay."""

    channel = Channel.PUSH
    provider_name = PROVIDER_FCM
    provider_label = "FCM"

    def validate(self, payload: PushPayload) -> None:
        """Check token, title and body are present.

        Raises:
            ConfigError: If any of them is empty
        """
        if not payload.token:
            raise ConfigError("Device token is required", self.channel)
        if not payload.title:
            raise ConfigError("Push title is required", self.channel)
        if not payload.body:
            raise ConfigError("Push body is required", self.channel)

    def credentials_available(self) -> bool:
        """Whether an FCM server key is configured."""
        return bool(self.config.fcm_server_key)

    def relay_function(self) -> str:
        """Name of the push relay function."""
        return self.config.relay.push_function

    def build_provider_body(self, payload: PushPayload) -> dict[str, Any]:
        """FCM body; click_action travels inside the data block."""
        notification = {"title": payload.title, "body": payload.body}
        if payload.image_url:
            notification["image"] = payload.image_url

        body: dict[str, Any] = {"to": payload.token, "notification": notification}

        data = dict(payload.data or {})
        if payload.click_action:
            data["click_action"] = payload.click_action
        if data:
            body["data"] = data

        return body

    def build_relay_body(self, payload: PushPayload) -> dict[str, Any]:
        """Relay body mirroring the direct fields."""
        body: dict[str, Any] = {
            "token": payload.token,
            "title": payload.title,
            "body": payload.body,
            "imageUrl": payload.image_url,
            "data": payload.data,
            "clickAction": payload.click_action,
        }
        return {key: value for key, value in body.items() if value is not None}

    def send_direct(self, payload: PushPayload) -> DeliveryOutcome:
        """POST to FCM and read the message id from the response body."""
        response = self._post(
            self.config.fcm_api_url,
            headers={"Authorization": f"key={self.config.fcm_server_key}"},
            json_data=self.build_provider_body(payload),
        )
        body = parse_json_body(response)

        if not response.ok:
            message = extract_error_message(response, self.provider_label)
            logger.error(
                "push_send_failed",
                token=payload.token,
                status_code=response.status_code,
                error=message,
            )
            return DeliveryOutcome.failed(
                ErrorKind.PROVIDER, message, provider=self.provider_name, response=body
            )

        first_result = _first_result(body)

        # FCM answers 200 even when it rejects the token
        failures = body.get("failure") if isinstance(body, dict) else None
        if failures and first_result.get("error"):
            message = f"FCM rejected device token: {first_result['error']}"
            logger.warning("push_token_rejected", token=payload.token, error=message)
            return DeliveryOutcome.failed(
                ErrorKind.PROVIDER, message, provider=self.provider_name, response=body
            )

        message_id = None
        if isinstance(body, dict):
            message_id = (
                body.get("message_id")
                or body.get("name")
                or first_result.get("message_id")
            )

        logger.info(
            "push_sent",
            token=payload.token,
            title=payload.title,
            message_id=message_id,
        )
        return DeliveryOutcome.sent(
            self.provider_name,
            message_id=str(message_id) if message_id is not None else None,
            response=body,
        )
