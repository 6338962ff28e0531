"""Exceptions raised inside the delivery pipeline.

Channel clients report transport and provider failures as outcomes, not
exceptions. Only ConfigError escapes validation and only
TemplateNotFoundError escapes the resolver; the orchestrator turns both into
failed outcomes of their error_kind and never lets them reach callers.
"""

from delivery.enums import Channel, ErrorKind


class DeliveryError(Exception):
    """Base exception for notification delivery errors."""

    error_kind: ErrorKind

    def __init__(self, message: str, channel: Channel | None = None):
        """Initialize delivery error.

        Args:
            message: Error message
            channel: Channel the failure happened on
        """
        self.channel = channel
        super().__init__(message)

    @property
    def message(self) -> str:
        """Error message passed at construction."""
        return str(self)


class ConfigError(DeliveryError):
    """Required input or credential is missing; detected before any I/O."""

    error_kind = ErrorKind.CONFIG


class TemplateNotFoundError(DeliveryError):
    """Template key is unknown or the template is disabled."""

    error_kind = ErrorKind.RESOLUTION

    def __init__(self, template_key: str, reason: str = "missing"):
        """Initialize template not found error.

        Args:
            template_key: Key that failed to resolve
            reason: "missing" or "inactive"
        """
        self.template_key = template_key
        self.reason = reason
        if reason == "inactive":
            message = f"Template '{template_key}' is inactive"
        else:
            message = f"Template '{template_key}' not found"
        super().__init__(message=message)
