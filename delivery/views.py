"""API views for the delivery app."""

import structlog
from pydantic import ValidationError
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from delivery.auth import ServiceKeyAuthentication
from delivery.pagination import DeliveryLogPageNumberPagination
from delivery.schemas import DeliveryLogDetail, DeliveryLogFilters, DispatchRequest
from delivery.schemas.request import EmailNotificationRequest, PushNotificationRequest
from delivery.schemas.response import TemplateInfo, TemplateListResponse
from delivery.services.delivery_log_store import delivery_log_store
from delivery.services.notification_service import notification_service
from delivery.services.template_resolver import template_resolver

logger = structlog.get_logger(__name__)


def _bad_request(e: ValidationError) -> Response:
    return Response(
        {
            "error": "bad_request",
            "message": "Invalid request parameters",
            "errors": e.errors(include_url=False, include_context=False),
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class SendEmailNotificationView(APIView):
    """API endpoint for sending one templated email."""

    authentication_classes = (ServiceKeyAuthentication,)
    permission_classes = (IsAuthenticated,)

    def post(self, request):
        """Handle POST request to send an email notification.

        Args:
            request: HTTP request object containing userId, templateKey,
                recipientEmail and variables

        Returns:
            200 OK with {success, error} once delivery has settled
            400 Bad Request if validation fails
            401 Unauthorized if the service key is missing or wrong
        """
        try:
            email_request = EmailNotificationRequest(**request.data)
        except ValidationError as e:
            logger.warning(
                "Invalid request body for email notification",
                validation_errors=e.errors(include_url=False),
            )
            return _bad_request(e)

        logger.info(
            "Email notification request received",
            user_id=email_request.user_id,
            template_key=email_request.template_key,
        )

        result = notification_service.send_email_notification(
            user_id=email_request.user_id,
            template_key=email_request.template_key,
            recipient_email=email_request.recipient_email,
            variables=email_request.variables,
        )

        return Response(result.to_response(), status=status.HTTP_200_OK)


class SendPushNotificationView(APIView):
    """API endpoint for pushing one notification to a user's devices."""

    authentication_classes = (ServiceKeyAuthentication,)
    permission_classes = (IsAuthenticated,)

    def post(self, request):
        """Handle POST request to send push notifications.

        Args:
            request: HTTP request object containing userId, templateKey,
                deviceTokens and variables

        Returns:
            200 OK with the per-device fan-out summary
            400 Bad Request if validation fails
            401 Unauthorized if the service key is missing or wrong
        """
        try:
            push_request = PushNotificationRequest(**request.data)
        except ValidationError as e:
            logger.warning(
                "Invalid request body for push notification",
                validation_errors=e.errors(include_url=False),
            )
            return _bad_request(e)

        logger.info(
            "Push notification request received",
            user_id=push_request.user_id,
            template_key=push_request.template_key,
            device_count=len(push_request.device_tokens),
        )

        fanout = notification_service.send_push_to_devices(
            user_id=push_request.user_id,
            template_key=push_request.template_key,
            device_tokens=push_request.device_tokens,
            variables=push_request.variables,
        )

        return Response(fanout.summary(), status=status.HTTP_200_OK)


class QueueNotificationView(APIView):
    """API endpoint for queuing a dispatch for a background worker."""

    authentication_classes = (ServiceKeyAuthentication,)
    permission_classes = (IsAuthenticated,)

    def post(self, request):
        """Handle POST request to queue a notification.

        Args:
            request: HTTP request object containing a dispatch request

        Returns:
            202 Accepted with the job id
            400 Bad Request if validation fails
            401 Unauthorized if the service key is missing or wrong
        """
        try:
            dispatch_request = DispatchRequest(**request.data)
        except ValidationError as e:
            logger.warning(
                "Invalid request body for queued notification",
                validation_errors=e.errors(include_url=False),
            )
            return _bad_request(e)

        job_id = notification_service.queue_notification(dispatch_request)

        return Response({"jobId": job_id}, status=status.HTTP_202_ACCEPTED)


class TemplateListView(APIView):
    """API endpoint for listing active notification templates."""

    authentication_classes = (ServiceKeyAuthentication,)
    permission_classes = (IsAuthenticated,)

    def get(self, _request):
        """Retrieve the active notification templates.

        Returns:
            200 OK with the list of templates
            401 Unauthorized if the service key is missing or wrong
        """
        templates = [
            TemplateInfo(
                template_key=template.template_key,
                template_name=template.template_name,
                is_critical=template.is_critical,
                has_push_content=bool(template.push_title or template.push_body),
            )
            for template in template_resolver.list_active_templates()
        ]

        logger.info("Template list retrieved", template_count=len(templates))

        return Response(
            TemplateListResponse(templates=templates).to_response(),
            status=status.HTTP_200_OK,
        )


class DeliveryLogListView(APIView):
    """API endpoint for browsing the delivery log."""

    authentication_classes = (ServiceKeyAuthentication,)
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        """Retrieve a page of delivery log rows, newest first.

        Query parameters notification_type, channel and status filter the
        rows; page and page_size select the page.

        Returns:
            200 OK with {count, next, previous, results}
            400 Bad Request if a filter value is invalid
            401 Unauthorized if the service key is missing or wrong
            404 Not Found if the page is out of range
        """
        params = {
            name: request.query_params.get(name)
            for name in ("notification_type", "channel", "status")
            if request.query_params.get(name)
        }
        try:
            filters = DeliveryLogFilters(**params)
        except ValidationError as e:
            logger.warning(
                "Invalid filters for delivery log listing",
                validation_errors=e.errors(include_url=False),
            )
            return _bad_request(e)

        paginator = DeliveryLogPageNumberPagination()
        page = paginator.paginate_queryset(
            delivery_log_store.query(filters), request, view=self
        )
        entries = [
            DeliveryLogDetail.model_validate(entry).to_response()
            for entry in page or []
        ]

        logger.info(
            "Delivery log page retrieved",
            entry_count=len(entries),
            **filters.as_lookup(),
        )

        return paginator.get_paginated_response(entries)
