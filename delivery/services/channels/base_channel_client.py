"""Base client for provider and relay delivery over HTTP."""

import json
from typing import Any

import requests
import structlog

from delivery.config import DeliveryConfig
from delivery.constants import PROVIDER_RELAY, TRANSPORT_FALLBACK_SIGNATURES
from delivery.enums import Channel, ErrorKind
from delivery.exceptions import ConfigError
from delivery.schemas import DeliveryOutcome
from delivery.services.transport import RuntimeEnvironment, decide

logger = structlog.get_logger(__name__)


def is_fallback_error(exc: Exception) -> bool:
    """Whether a direct-call failure should be retried through the relay.

    Connection failures and timeouts qualify, as does any error whose text
    looks like a cross-origin or fetch rejection.
    """
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    text = str(exc).lower()
    return any(signature in text for signature in TRANSPORT_FALLBACK_SIGNATURES)


def parse_json_body(response: requests.Response) -> Any:
    """Decoded JSON body, or None when the body is empty or not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def extract_error_message(response: requests.Response, provider_label: str) -> str:
    """Best-effort error message from a failed provider or relay response.

    Args:
        response: The non-2xx response
        provider_label: Human readable provider name for the last resort text

    Returns:
        Structured message if the body has one, else the raw body, else
        "<provider_label> API error: <status>".
    """
    body = parse_json_body(response)

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)

        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if error:
            return json.dumps(error)

        if body.get("message"):
            return str(body["message"])

    text = response.text.strip()
    if text:
        return text

    return f"{provider_label} API error: {response.status_code}"


class BaseChannelClient:
    """Base class for channel clients.

    Subclasses implement validation, the direct provider call and the relay
    body. This class owns transport selection, the one-time relay fallback
    and the relay call itself.
    """

    channel: Channel
    provider_name: str
    provider_label: str

    def __init__(
        self,
        config: DeliveryConfig | None = None,
        environment: RuntimeEnvironment | None = None,
    ):
        """Initialize channel client.

        Args:
            config: Delivery configuration (defaults to Django settings)
            environment: Calling environment (defaults to detection)
        """
        self.config = config or DeliveryConfig.from_settings()
        self.environment = environment or RuntimeEnvironment.detect(
            self.config.runtime
        )
        self.timeout = self.config.http_timeout

    def validate(self, payload: Any) -> None:
        """Check the payload before any network call.

        Raises:
            ConfigError: If a required field is missing
        """
        raise NotImplementedError

    def credentials_available(self) -> bool:
        """Whether the direct provider credential is configured."""
        raise NotImplementedError

    def relay_function(self) -> str:
        """Name of the relay function for this channel."""
        raise NotImplementedError

    def build_relay_body(self, payload: Any) -> dict[str, Any]:
        """Relay request body for the payload."""
        raise NotImplementedError

    def send_direct(self, payload: Any) -> DeliveryOutcome:
        """Call the provider directly.

        Raises:
            requests.RequestException: For network-level failures
        """
        raise NotImplementedError

    def send(self, payload: Any) -> DeliveryOutcome:
        """Validate the payload and make a single delivery attempt.

        Args:
            payload: Channel payload

        Returns:
            DeliveryOutcome; validation failures come back as config errors
        """
        try:
            self.validate(payload)
        except ConfigError as e:
            logger.warning(
                "payload_validation_failed",
                channel=self.channel.value,
                error=e.message,
            )
            return DeliveryOutcome.failed(e.error_kind, e.message)

        return self.attempt(payload)

    def attempt(self, payload: Any) -> DeliveryOutcome:
        """Make one delivery attempt through the selected transport.

        A direct call that fails at the network level is retried once
        through the relay within the same attempt.

        Args:
            payload: Validated channel payload

        Returns:
            DeliveryOutcome for this attempt
        """
        decision = decide(
            self.channel,
            credentials_available=self.credentials_available(),
            environment=self.environment,
            explicit_override=self.config.force_relay or bool(payload.use_relay),
        )
        logger.debug(
            "transport_selected",
            channel=self.channel.value,
            use_relay=decision.use_relay,
            reason=decision.reason,
        )

        if decision.use_relay:
            return self.send_via_relay(payload)

        try:
            return self.send_direct(payload)
        except requests.RequestException as e:
            if is_fallback_error(e):
                logger.warning(
                    "relay_fallback_triggered",
                    channel=self.channel.value,
                    provider=self.provider_name,
                    error=str(e),
                )
                return self.send_via_relay(payload)

            logger.error(
                "direct_call_failed",
                channel=self.channel.value,
                provider=self.provider_name,
                error=str(e),
            )
            return DeliveryOutcome.failed(
                ErrorKind.TRANSPORT,
                f"{self.provider_label} request failed: {e}",
                provider=self.provider_name,
            )

    def send_via_relay(self, payload: Any) -> DeliveryOutcome:
        """Deliver through the relay function for this channel.

        Args:
            payload: Validated channel payload

        Returns:
            DeliveryOutcome with the relay-assigned message id on success
        """
        relay = self.config.relay
        if not relay.configured:
            logger.error("relay_not_configured", channel=self.channel.value)
            return DeliveryOutcome.failed(
                ErrorKind.CONFIG,
                "Relay is not configured (RELAY_BASE_URL and RELAY_API_KEY)",
                provider=PROVIDER_RELAY,
            )

        function_name = self.relay_function()
        headers = {
            "apikey": relay.api_key,
            "Authorization": f"Bearer {relay.api_key}",
        }

        try:
            response = self._post(
                relay.endpoint(function_name),
                headers=headers,
                json_data=self.build_relay_body(payload),
            )
        except requests.RequestException as e:
            logger.error(
                "relay_request_failed",
                channel=self.channel.value,
                function=function_name,
                error=str(e),
            )
            return DeliveryOutcome.failed(
                ErrorKind.TRANSPORT,
                f"Relay request failed: {e}",
                provider=PROVIDER_RELAY,
            )

        body = parse_json_body(response)

        if response.status_code == 404:
            return DeliveryOutcome.failed(
                ErrorKind.PROVIDER,
                f"Relay function '{function_name}' is not deployed",
                provider=PROVIDER_RELAY,
                response=body,
            )

        if not response.ok or not (
            isinstance(body, dict) and body.get("success") is True
        ):
            message = extract_error_message(response, "Relay")
            logger.error(
                "relay_delivery_failed",
                channel=self.channel.value,
                function=function_name,
                status_code=response.status_code,
                error=message,
            )
            return DeliveryOutcome.failed(
                ErrorKind.PROVIDER,
                message,
                provider=PROVIDER_RELAY,
                response=body,
            )

        message_id = body.get("messageId")
        logger.info(
            "relay_delivery_succeeded",
            channel=self.channel.value,
            function=function_name,
            message_id=message_id,
        )
        return DeliveryOutcome.sent(
            PROVIDER_RELAY,
            message_id=str(message_id) if message_id is not None else None,
            response=body,
        )

    def _post(
        self,
        url: str,
        headers: dict[str, str],
        json_data: dict[str, Any],
    ) -> requests.Response:
        """POST a JSON body with the configured timeout.

        Raises:
            requests.RequestException: For network-level failures
        """
        request_headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        request_headers.update(headers)

        logger.info(
            "Making delivery request",
            channel=self.channel.value,
            url=url,
        )

        response = requests.post(
            url,
            headers=request_headers,
            json=json_data,
            timeout=self.timeout,
        )

        logger.info(
            "Received delivery response",
            channel=self.channel.value,
            url=url,
            status_code=response.status_code,
        )
        return response
