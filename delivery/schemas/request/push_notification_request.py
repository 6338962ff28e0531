"""Request schema for the push notification endpoint."""

from typing import Any

from pydantic import Field, field_validator

from delivery.schemas.base_schema_model import BaseSchemaModel
from delivery.schemas.variables import coerce_variables


class PushNotificationRequest(BaseSchemaModel):
    """Send one templated push notification to every device of a user."""

    user_id: int = Field(..., description="Platform user the push is for")
    template_key: str = Field(..., min_length=1, description="Template key")
    device_tokens: list[str] = Field(
        ..., min_length=1, max_length=100, description="Device registration tokens"
    )
    variables: dict[str, str] = Field(default_factory=dict)

    @field_validator("variables", mode="before")
    @classmethod
    def _stringify_variables(cls, value: Any) -> dict[str, str]:
        return coerce_variables(value)
