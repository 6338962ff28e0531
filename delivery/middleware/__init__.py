"""Middleware components for the notification engine."""

from delivery.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
