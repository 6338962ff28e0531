"""End-to-end dispatch of one notification: resolve, send, record.

A dispatch moves from START to TEMPLATE_RESOLVED and then to SENT or
FAILED, or straight from START to FAILED when the recipient is missing or
the template cannot be resolved. Every dispatch ends with the delivery log
row for its key updated, and no exception ever reaches the caller.
"""

import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import NamedTuple

from django.db import DatabaseError

import structlog

from delivery.config import DeliveryConfig
from delivery.enums import Channel, ErrorKind
from delivery.exceptions import ConfigError, TemplateNotFoundError
from delivery.logging import clear_request_id, get_request_id, set_request_id
from delivery.models import NotificationTemplate
from delivery.schemas import (
    ChannelContent,
    DeliveryOutcome,
    DeliveryResult,
    DispatchRequest,
    EmailPayload,
    FanOutResult,
    PushPayload,
)
from delivery.services.channels import (
    BaseChannelClient,
    EmailChannelClient,
    PushChannelClient,
)
from delivery.services.delivery_log_store import DeliveryLogStore, delivery_log_store
from delivery.services.retry import RetryController
from delivery.services.template_resolver import TemplateResolver, template_resolver
from delivery.services.transport import RuntimeEnvironment

logger = structlog.get_logger(__name__)


class _Resolution(NamedTuple):
    template: NotificationTemplate | None = None
    content: ChannelContent | None = None
    failure: DeliveryOutcome | None = None


class _Prepared(NamedTuple):
    resolution: _Resolution
    payload: EmailPayload | PushPayload | None = None
    failure: DeliveryOutcome | None = None


def _crash_outcome(error: Exception) -> DeliveryOutcome:
    return DeliveryOutcome.failed(
        ErrorKind.TRANSPORT, f"Unexpected dispatch error: {error}"
    )


class DeliveryOrchestrator:
    """Runs dispatches through resolver, channel client, retry and log store."""

    def __init__(
        self,
        config: DeliveryConfig | None = None,
        resolver: TemplateResolver | None = None,
        log_store: DeliveryLogStore | None = None,
        email_client: BaseChannelClient | None = None,
        push_client: BaseChannelClient | None = None,
        environment: RuntimeEnvironment | None = None,
        sleep: Callable[[float], None] | None = None,
        cancel_event: threading.Event | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Delivery configuration (defaults to Django settings)
            resolver: Template resolver
            log_store: Delivery log store
            email_client: Email channel client
            push_client: Push channel client
            environment: Calling environment shared by the default clients
            sleep: Wait function for retries (defaults to time.sleep)
            cancel_event: Event that aborts pending retry waits when set
        """
        self.config = config or DeliveryConfig.from_settings()
        self.resolver = resolver or template_resolver
        self.log_store = log_store or delivery_log_store
        self.clients: dict[Channel, BaseChannelClient] = {
            Channel.EMAIL: email_client or EmailChannelClient(self.config, environment),
            Channel.PUSH: push_client or PushChannelClient(self.config, environment),
        }
        self._sleep = sleep
        self.cancel_event = cancel_event

    def dispatch(self, request: DispatchRequest) -> DeliveryResult:
        """Deliver one notification to one recipient.

        Args:
            request: The dispatch request

        Returns:
            DeliveryResult; failures are reported, never raised
        """
        channel = Channel(request.channel)
        logger.info(
            "notification_dispatch_started",
            user_id=request.user_id,
            template_key=request.template_key,
            channel=channel.value,
        )

        try:
            resolution = None
            if request.recipient.strip():
                resolution = self._resolve(
                    request.template_key, channel, request.variables
                )
            prepared = self._prepare(request, resolution)

            if prepared.failure is not None:
                return self._finalize(request, prepared, prepared.failure, 0)

            outcome, attempts = self._send(channel, prepared.payload)
            return self._finalize(request, prepared, outcome, attempts)
        except Exception as e:
            logger.exception(
                "notification_dispatch_crashed",
                user_id=request.user_id,
                template_key=request.template_key,
                channel=channel.value,
            )
            return self._record_crash(request, e)

    def dispatch_push_fanout(
        self,
        user_id: int,
        template_key: str,
        tokens: Iterable[str],
        variables: dict[str, str] | None = None,
    ) -> FanOutResult:
        """Send one push notification to several devices concurrently.

        The template is resolved once. Each token is then dispatched
        independently, and all sends finish before this returns.

        Args:
            user_id: User owning the devices
            template_key: Template to render
            tokens: Device tokens; blanks and duplicates are dropped
            variables: Placeholder values

        Returns:
            FanOutResult with one entry per distinct token
        """
        stripped = (token.strip() for token in tokens if token)
        unique_tokens = [token for token in dict.fromkeys(stripped) if token]
        if not unique_tokens:
            logger.info(
                "push_fanout_no_tokens", user_id=user_id, template_key=template_key
            )
            return FanOutResult()

        requests_by_token = [
            DispatchRequest(
                user_id=user_id,
                template_key=template_key,
                channel=Channel.PUSH,
                recipient=token,
                variables=variables or {},
            )
            for token in unique_tokens
        ]

        logger.info(
            "push_fanout_started",
            user_id=user_id,
            template_key=template_key,
            token_count=len(unique_tokens),
        )

        try:
            resolution = self._resolve(
                template_key, Channel.PUSH, requests_by_token[0].variables
            )
            prepared = [
                self._prepare(request, resolution) for request in requests_by_token
            ]
        except Exception as e:
            logger.exception(
                "push_fanout_preparation_crashed",
                user_id=user_id,
                template_key=template_key,
            )
            crashed = _Prepared(resolution=_Resolution(), failure=_crash_outcome(e))
            prepared = [crashed] * len(requests_by_token)

        request_id = get_request_id()
        sends: dict[int, tuple[DeliveryOutcome, int]] = {}
        pending = [i for i, item in enumerate(prepared) if item.failure is None]

        if pending:
            max_workers = max(1, min(self.config.fanout_max_workers, len(pending)))
            with ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="push-fanout"
            ) as executor:
                futures = {
                    i: executor.submit(
                        self._send_in_worker, request_id, prepared[i].payload
                    )
                    for i in pending
                }
                sends = {i: future.result() for i, future in futures.items()}

        results = []
        for i, (request, item) in enumerate(zip(requests_by_token, prepared)):
            outcome, attempts = sends.get(i, (item.failure, 0))
            results.append(self._finalize(request, item, outcome, attempts))

        fanout = FanOutResult(results=results)
        logger.info(
            "push_fanout_completed",
            user_id=user_id,
            template_key=template_key,
            sent_count=fanout.sent_count,
            failed_count=fanout.failed_count,
        )
        return fanout

    def _resolve(
        self, template_key: str, channel: Channel, variables: dict[str, str]
    ) -> _Resolution:
        try:
            template = self.resolver.resolve(template_key)
        except TemplateNotFoundError as e:
            return _Resolution(
                failure=DeliveryOutcome.failed(e.error_kind, e.message)
            )
        content = self.resolver.render(template, channel, variables)
        return _Resolution(template=template, content=content)

    def _prepare(
        self, request: DispatchRequest, resolution: _Resolution | None
    ) -> _Prepared:
        """Check the recipient, apply the resolution and validate the payload."""
        channel = Channel(request.channel)

        if not request.recipient.strip():
            return _Prepared(
                resolution=_Resolution(),
                failure=DeliveryOutcome.failed(
                    ErrorKind.CONFIG,
                    f"Recipient is required for {channel.value} delivery",
                ),
            )

        if resolution.failure is not None:
            logger.warning(
                "notification_skipped_template_unavailable",
                user_id=request.user_id,
                template_key=request.template_key,
                channel=channel.value,
                reason=resolution.failure.error_message,
            )
            return _Prepared(resolution=resolution, failure=resolution.failure)

        payload = self._build_payload(request, resolution.content)
        try:
            self.clients[channel].validate(payload)
        except ConfigError as e:
            logger.warning(
                "notification_payload_invalid",
                user_id=request.user_id,
                template_key=request.template_key,
                channel=channel.value,
                error=e.message,
            )
            return _Prepared(
                resolution=resolution,
                payload=payload,
                failure=DeliveryOutcome.failed(e.error_kind, e.message),
            )

        return _Prepared(resolution=resolution, payload=payload)

    def _build_payload(
        self, request: DispatchRequest, content: ChannelContent
    ) -> EmailPayload | PushPayload:
        if Channel(request.channel) is Channel.EMAIL:
            return EmailPayload(
                to=request.recipient.strip(),
                subject=content.subject,
                html=content.html,
                text=content.text or None,
            )
        return PushPayload(
            token=request.recipient.strip(),
            title=content.subject,
            body=content.text,
            image_url=content.image_url,
            click_action=content.action_url,
            data={"notification_type": request.template_key},
        )

    def _send(
        self, channel: Channel, payload: EmailPayload | PushPayload
    ) -> tuple[DeliveryOutcome, int]:
        """Run channel attempts under the retry controller."""
        controller = RetryController(
            max_attempts=self.config.max_attempts,
            base_delay=self.config.retry_base_delay,
            sleep=self._sleep,
            cancel_event=self.cancel_event,
        )
        client = self.clients[channel]
        outcome = controller.run(lambda: client.attempt(payload))
        return outcome, controller.attempts_made

    def _send_in_worker(
        self, request_id: str | None, payload: PushPayload
    ) -> tuple[DeliveryOutcome, int]:
        """Push send on a fan-out worker thread; never raises."""
        set_request_id(request_id)
        try:
            return self._send(Channel.PUSH, payload)
        except Exception as e:
            logger.exception("push_fanout_send_crashed", token=payload.token)
            return (
                DeliveryOutcome.failed(
                    ErrorKind.TRANSPORT, f"Unexpected send error: {e}"
                ),
                1,
            )
        finally:
            clear_request_id()

    def _record_crash(
        self, request: DispatchRequest, error: Exception
    ) -> DeliveryResult:
        """Record a crashed dispatch as a failed transport outcome."""
        prepared = _Prepared(resolution=_Resolution(), failure=_crash_outcome(error))
        return self._finalize(request, prepared, prepared.failure, 0)

    def _finalize(
        self,
        request: DispatchRequest,
        prepared: _Prepared,
        outcome: DeliveryOutcome,
        attempts: int,
    ) -> DeliveryResult:
        """Record the outcome in the delivery log and build the result."""
        channel = Channel(request.channel)
        template = prepared.resolution.template

        try:
            self.log_store.record(
                user_id=request.user_id,
                notification_type=request.template_key,
                channel=channel,
                recipient=request.recipient.strip(),
                outcome=outcome,
                content=prepared.resolution.content,
                template=template.template_name if template else None,
            )
        except Exception as e:
            logger.error(
                "delivery_log_write_failed",
                user_id=request.user_id,
                template_key=request.template_key,
                channel=channel.value,
                error=str(e),
                exc_info=not isinstance(e, DatabaseError),
            )

        if outcome.success:
            logger.info(
                "notification_sent_successfully",
                user_id=request.user_id,
                template_key=request.template_key,
                channel=channel.value,
                provider=outcome.provider,
                attempts=attempts,
            )
        else:
            logger.warning(
                "notification_delivery_failed",
                user_id=request.user_id,
                template_key=request.template_key,
                channel=channel.value,
                error_kind=outcome.error_kind,
                error=outcome.error_message,
                attempts=attempts,
            )

        return DeliveryResult(
            success=outcome.success,
            channel=channel,
            recipient=request.recipient.strip(),
            template_key=request.template_key,
            provider=outcome.provider,
            provider_message_id=outcome.provider_message_id,
            error_kind=outcome.error_kind,
            error=outcome.error_message,
            attempts=attempts,
        )
