"""Background job that runs a queued dispatch.

Jobs are enqueued by NotificationService.queue_notification with the
dispatch request serialized to JSON. The job runs the same pipeline as a
synchronous send, including retries and the delivery log write.
"""

from typing import Any

import structlog

from delivery.schemas import DispatchRequest
from delivery.services.notification_service import notification_service

logger = structlog.get_logger(__name__)


def dispatch_notification_job(payload: dict[str, Any]) -> dict[str, Any]:
    """Run one queued dispatch.

    This job is executed by RQ workers.

    Args:
        payload: DispatchRequest serialized with model_dump(mode="json").

    Returns:
        The DeliveryResult as a JSON-ready dict, stored as the job result.

    Raises:
        pydantic.ValidationError: If the payload is not a valid request.
    """
    request = DispatchRequest.model_validate(payload)

    logger.info(
        "queued_notification_started",
        user_id=request.user_id,
        template_key=request.template_key,
        channel=request.channel,
    )

    result = notification_service.orchestrator.dispatch(request)

    logger.info(
        "queued_notification_finished",
        user_id=request.user_id,
        template_key=request.template_key,
        success=result.success,
        attempts=result.attempts,
    )
    return result.model_dump(mode="json", by_alias=True)
