"""Caller-facing notification API.

Business code calls these methods after its own state change has been
committed. Delivery failures are reported in the return value and never
raised, so a failed notification cannot undo or block the business action.
"""

from collections.abc import Iterable

import django_rq
import structlog

from delivery.enums import Channel
from delivery.schemas import (
    DeliveryLogFilters,
    DeliveryLogPage,
    DispatchRequest,
    FanOutResult,
    SendResult,
)
from delivery.schemas.variables import coerce_variables
from delivery.services.orchestrator import DeliveryOrchestrator

logger = structlog.get_logger(__name__)

DISPATCH_JOB = "delivery.jobs.dispatch_jobs.dispatch_notification_job"


class NotificationService:
    """Service for sending templated email and push notifications."""

    def __init__(self, orchestrator: DeliveryOrchestrator | None = None) -> None:
        """Initialize notification service.

        Args:
            orchestrator: Dispatch pipeline (defaults to one built from settings)
        """
        self.orchestrator = orchestrator or DeliveryOrchestrator()
        self.queue = django_rq.get_queue("default")

    def send_email_notification(
        self,
        user_id: int,
        template_key: str,
        recipient_email: str,
        variables: dict[str, str] | None = None,
    ) -> SendResult:
        """Render a template and email it to one recipient.

        Args:
            user_id: User the notification is for.
            template_key: Template to render.
            recipient_email: Destination address.
            variables: Placeholder values.

        Returns:
            SendResult with success and, on failure, the error message.
        """
        request = DispatchRequest(
            user_id=user_id,
            template_key=template_key,
            channel=Channel.EMAIL,
            recipient=recipient_email or "",
            variables=variables,
        )
        return SendResult.from_result(self.orchestrator.dispatch(request))

    def send_push_notification(
        self,
        user_id: int,
        template_key: str,
        device_token: str,
        variables: dict[str, str] | None = None,
    ) -> SendResult:
        """Render a template and push it to one device.

        Args:
            user_id: User owning the device.
            template_key: Template to render.
            device_token: FCM registration token.
            variables: Placeholder values.

        Returns:
            SendResult with success and, on failure, the error message.
        """
        request = DispatchRequest(
            user_id=user_id,
            template_key=template_key,
            channel=Channel.PUSH,
            recipient=device_token or "",
            variables=variables,
        )
        return SendResult.from_result(self.orchestrator.dispatch(request))

    def send_push_to_devices(
        self,
        user_id: int,
        template_key: str,
        device_tokens: Iterable[str],
        variables: dict[str, str] | None = None,
    ) -> FanOutResult:
        """Push one notification to every device a user has registered.

        Args:
            user_id: User owning the devices.
            template_key: Template to render.
            device_tokens: FCM registration tokens.
            variables: Placeholder values.

        Returns:
            FanOutResult with one result per distinct token.
        """
        return self.orchestrator.dispatch_push_fanout(
            user_id=user_id,
            template_key=template_key,
            tokens=device_tokens,
            variables=coerce_variables(variables),
        )

    def queue_notification(self, request: DispatchRequest) -> str:
        """Queue a dispatch for a background worker.

        Args:
            request: The dispatch to run.

        Returns:
            ID of the enqueued job.
        """
        job = self.queue.enqueue(DISPATCH_JOB, request.model_dump(mode="json"))

        logger.info(
            "notification_queued",
            job_id=job.id,
            user_id=request.user_id,
            template_key=request.template_key,
            channel=request.channel,
        )
        return job.id

    def get_delivery_logs(
        self,
        page: int = 1,
        page_size: int = 20,
        notification_type: str | None = None,
        channel: Channel | str | None = None,
        status: str | None = None,
    ) -> DeliveryLogPage:
        """Read the delivery log newest-first with optional filters.

        Args:
            page: 1-based page number.
            page_size: Rows per page.
            notification_type: Only rows for this template key.
            channel: Only rows for this channel.
            status: Only rows with this status (sent, failed).

        Returns:
            DeliveryLogPage with the rows and the exact matching total.
        """
        filters = DeliveryLogFilters(
            notification_type=notification_type, channel=channel, status=status
        )
        return self.orchestrator.log_store.list_entries(filters, page, page_size)


notification_service = NotificationService()
