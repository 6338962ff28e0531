"""Request schema for the email notification endpoint."""

from typing import Any

from pydantic import EmailStr, Field, field_validator

from delivery.schemas.base_schema_model import BaseSchemaModel
from delivery.schemas.variables import coerce_variables


class EmailNotificationRequest(BaseSchemaModel):
    """Send one templated email to one address."""

    user_id: int = Field(..., description="Platform user the email is for")
    template_key: str = Field(..., min_length=1, description="Template key")
    recipient_email: EmailStr = Field(..., description="Recipient address")
    variables: dict[str, str] = Field(default_factory=dict)

    @field_validator("variables", mode="before")
    @classmethod
    def _stringify_variables(cls, value: Any) -> dict[str, str]:
        return coerce_variables(value)
