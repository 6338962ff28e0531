"""Schemas for reading the delivery log."""

from datetime import datetime
from typing import Any

from pydantic import Field

from delivery.enums import Channel, DeliveryStatus
from delivery.schemas.base_schema_model import BaseSchemaModel


class DeliveryLogFilters(BaseSchemaModel):
    """Optional equality filters for delivery log listings."""

    notification_type: str | None = Field(None, description="Template key")
    channel: Channel | None = Field(None, description="Delivery channel")
    status: DeliveryStatus | None = Field(None, description="sent or failed")

    def as_lookup(self) -> dict[str, str]:
        """ORM filter kwargs for the filters that are set."""
        return self.model_dump(exclude_none=True)


class DeliveryLogDetail(BaseSchemaModel):
    """One delivery log row as exposed to the admin console."""

    id: int
    user_id: int
    notification_type: str
    channel: Channel
    recipient: str
    subject: str | None = None
    content: str | None = None
    template: str | None = None
    status: DeliveryStatus
    skip_reason: str | None = None
    provider: str | None = None
    provider_message_id: str | None = None
    provider_response: Any = None
    attempt_count: int
    created_at: datetime
    updated_at: datetime
    sent_at: datetime | None = None


class DeliveryLogPage(BaseSchemaModel):
    """One page of delivery log rows, newest first, with the exact total."""

    entries: list[DeliveryLogDetail] = Field(default_factory=list)
    total: int = Field(0, ge=0, description="Rows matching the filters")
    page: int = Field(1, ge=1, description="Current page number")
    page_size: int = Field(20, ge=1, description="Number of rows per page")
