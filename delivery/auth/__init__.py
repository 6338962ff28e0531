"""Authentication for the notification engine API."""

from delivery.auth.service_key import ServiceCaller, ServiceKeyAuthentication

__all__ = ["ServiceCaller", "ServiceKeyAuthentication"]
