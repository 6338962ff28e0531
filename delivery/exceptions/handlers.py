"""Global exception handler for the notification engine API."""

import logging
import traceback
from datetime import UTC, datetime
from typing import Any

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.http import Http404

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from delivery.exceptions.delivery_exceptions import ConfigError, TemplateNotFoundError
from delivery.logging.context import get_request_id

logger = logging.getLogger(__name__)


def custom_exception_handler(
    exc: Exception, context: dict[str, Any]
) -> Response | None:
    """Custom exception handler for Django REST Framework.

    Produces the standard body {status, message, request_id, timestamp} for
    anything DRF does not handle itself and logs the failure with the
    request path.

    Args:
        exc: The exception that was raised.
        context: Context dictionary containing request and view information.

    Returns:
        A Response object with the error details.
    """
    view = context.get("view")
    request = view.request if view else None
    request_id = get_request_id()

    response = exception_handler(exc, context)

    if response is None:
        if isinstance(exc, TemplateNotFoundError):
            status_code = status.HTTP_404_NOT_FOUND
            message = str(exc)
        elif isinstance(exc, ConfigError):
            status_code = status.HTTP_400_BAD_REQUEST
            message = str(exc)
        elif isinstance(exc, Http404):
            status_code = status.HTTP_404_NOT_FOUND
            message = "The requested resource was not found."
        elif isinstance(exc, PermissionDenied):
            status_code = status.HTTP_403_FORBIDDEN
            message = "You do not have permission to perform this action."
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            message = "An internal server error occurred."

        response = Response(
            _create_error_response(status_code, message, request_id),
            status=status_code,
        )

    if request_id and response:
        response["X-Request-ID"] = request_id

    _log_exception(exc, request, response)

    return response


def _create_error_response(
    status_code: int, message: str, request_id: str | None
) -> dict[str, Any]:
    """Create a standardized error response body."""
    return {
        "status": status_code,
        "message": message,
        "request_id": request_id,
        "timestamp": datetime.now(UTC).isoformat(),
    }


def _log_exception(
    exc: Exception,
    request: Any,
    response: Response | None,
) -> None:
    """Log exception details; client errors at WARNING, the rest at ERROR.

    Stack traces are only included in DEBUG mode.
    """
    status_code = response.status_code if response else 500
    if isinstance(exc, (Http404, APIException, ConfigError, TemplateNotFoundError)):
        log_level = logging.WARNING if 400 <= status_code < 500 else logging.ERROR
    else:
        log_level = logging.ERROR

    request_path = request.path if request else "unknown"
    request_method = request.method if request else "unknown"

    log_message = (
        f"Exception occurred: {type(exc).__name__}: {exc} | "
        f"Path: {request_method} {request_path} | "
        f"Status: {status_code}"
    )

    if settings.DEBUG:
        stack_trace = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
        log_message += f"\nStack trace:\n{stack_trace}"

    logger.log(log_level, log_message)
