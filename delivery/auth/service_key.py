"""Static service-key authentication for Django REST Framework.

The engine is called by the platform's approval workflow, not by end users,
so a shared key in the X-Service-Key header identifies the caller.
"""

import hmac

from django.conf import settings

import structlog
from rest_framework import authentication, exceptions

from delivery.constants import SERVICE_KEY_HEADER

logger = structlog.get_logger(__name__)


class ServiceCaller:
    """Authenticated caller for service-key requests.

    This is not a Django User model, just a marker the permission classes
    can check.
    """

    is_authenticated = True

    def __init__(self, name: str = "service"):
        """Initialize service caller.

        Args:
            name: Label for logging
        """
        self.name = name

    def __str__(self):
        """String representation."""
        return f"ServiceCaller({self.name})"


class ServiceKeyAuthentication(authentication.BaseAuthentication):
    """Authenticate requests carrying the configured service key."""

    def authenticate(self, request):
        """Authenticate the request using the X-Service-Key header.

        Args:
            request: DRF request object

        Returns:
            Tuple of (caller, None) or None if no key header was sent

        Raises:
            AuthenticationFailed: If the key is wrong or not configured
        """
        provided = request.headers.get(SERVICE_KEY_HEADER)
        if not provided:
            return None

        expected = settings.NOTIFICATION_SERVICE_KEY
        if not expected:
            logger.error("Service key authentication attempted but no key configured")
            raise exceptions.AuthenticationFailed("Service key not configured")

        if not hmac.compare_digest(provided.encode(), expected.encode()):
            logger.warning("Invalid service key", path=request.path)
            raise exceptions.AuthenticationFailed("Invalid service key")

        return ServiceCaller(), None

    def authenticate_header(self, _request):
        """Return the header name used for the WWW-Authenticate response."""
        return SERVICE_KEY_HEADER
