"""Exception handling utilities for the notification engine."""

from delivery.exceptions.delivery_exceptions import (
    ConfigError,
    DeliveryError,
    TemplateNotFoundError,
)
from delivery.exceptions.handlers import custom_exception_handler

__all__ = [
    "ConfigError",
    "DeliveryError",
    "TemplateNotFoundError",
    "custom_exception_handler",
]
