"""Schemas for dispatch requests and their results."""

from typing import Any

from pydantic import Field, field_validator

from delivery.enums import Channel, ErrorKind
from delivery.schemas.base_schema_model import BaseSchemaModel
from delivery.schemas.variables import coerce_variables


class DispatchRequest(BaseSchemaModel):
    """One logical notification for one recipient on one channel.

    The recipient is not required here: an empty recipient is a config
    failure the orchestrator still records in the delivery log.
    """

    user_id: int = Field(..., description="Platform user the message is for")
    template_key: str = Field(..., min_length=1, description="Template to render")
    channel: Channel = Field(..., description="Delivery channel")
    recipient: str = Field("", description="Email address or device token")
    variables: dict[str, str] = Field(
        default_factory=dict, description="Template placeholder values"
    )

    @field_validator("variables", mode="before")
    @classmethod
    def _stringify_variables(cls, value: Any) -> dict[str, str]:
        return coerce_variables(value)


class DeliveryResult(BaseSchemaModel):
    """Settled result of one dispatch."""

    success: bool
    channel: Channel
    recipient: str
    template_key: str
    provider: str | None = None
    provider_message_id: str | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None
    attempts: int = 0


class SendResult(BaseSchemaModel):
    """Caller-facing projection of a delivery result."""

    success: bool
    error: str | None = None

    @classmethod
    def from_result(cls, result: DeliveryResult) -> "SendResult":
        """Build the caller view of a dispatch result."""
        return cls(success=result.success, error=result.error)


class FanOutResult(BaseSchemaModel):
    """Aggregated results of a push fan-out, one slot per device token."""

    results: list[DeliveryResult] = Field(default_factory=list)

    @property
    def sent_count(self) -> int:
        """Number of tokens that were delivered."""
        return sum(1 for result in self.results if result.success)

    @property
    def failed_count(self) -> int:
        """Number of tokens that failed."""
        return len(self.results) - self.sent_count

    @property
    def success(self) -> bool:
        """True when at least one device received the notification."""
        return self.sent_count > 0

    def summary(self) -> dict[str, Any]:
        """JSON-ready summary including the per-token results."""
        return {
            "success": self.success,
            "sentCount": self.sent_count,
            "failedCount": self.failed_count,
            "results": [result.to_response() for result in self.results],
        }
