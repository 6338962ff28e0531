"""Schemas for transport decisions and per-attempt outcomes."""

from typing import Any

from delivery.enums import ErrorKind
from delivery.schemas.base_schema_model import BaseSchemaModel


class TransportDecision(BaseSchemaModel):
    """Whether a call goes through the relay, and why.

    Computed per call; never cached or persisted.
    """

    use_relay: bool
    reason: str


class DeliveryOutcome(BaseSchemaModel):
    """Result of one channel attempt (direct, relay, or direct + fallback)."""

    success: bool
    provider: str | None = None
    provider_message_id: str | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None
    provider_response: Any = None

    @property
    def retryable(self) -> bool:
        """Whether a failed outcome may be attempted again."""
        if self.success or self.error_kind is None:
            return False
        return ErrorKind(self.error_kind).retryable

    @classmethod
    def sent(
        cls,
        provider: str,
        message_id: str | None = None,
        response: Any = None,
    ) -> "DeliveryOutcome":
        """Successful outcome."""
        return cls(
            success=True,
            provider=provider,
            provider_message_id=message_id,
            provider_response=response,
        )

    @classmethod
    def failed(
        cls,
        error_kind: ErrorKind,
        message: str,
        provider: str | None = None,
        response: Any = None,
    ) -> "DeliveryOutcome":
        """Failed outcome with its classification."""
        return cls(
            success=False,
            provider=provider,
            error_kind=error_kind,
            error_message=message,
            provider_response=response,
        )
