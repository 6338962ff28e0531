"""Pydantic schemas for the delivery app."""

from delivery.schemas.base_schema_model import BaseSchemaModel
from delivery.schemas.content import ChannelContent
from delivery.schemas.delivery_log import (
    DeliveryLogDetail,
    DeliveryLogFilters,
    DeliveryLogPage,
)
from delivery.schemas.dispatch import (
    DeliveryResult,
    DispatchRequest,
    FanOutResult,
    SendResult,
)
from delivery.schemas.outcome import DeliveryOutcome, TransportDecision
from delivery.schemas.payloads import EmailPayload, PushPayload

__all__ = [
    "BaseSchemaModel",
    "ChannelContent",
    "DeliveryLogDetail",
    "DeliveryLogFilters",
    "DeliveryLogPage",
    "DeliveryOutcome",
    "DeliveryResult",
    "DispatchRequest",
    "EmailPayload",
    "FanOutResult",
    "PushPayload",
    "SendResult",
    "TransportDecision",
]
