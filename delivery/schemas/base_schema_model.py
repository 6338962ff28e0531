"""Base pydantic model shared by every delivery schema."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchemaModel(BaseModel):
    """Base model for engine schemas.

    Input is accepted in snake_case from Python callers and in camelCase from
    the admin console; output for the console is camelCase JSON.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    def to_response(self) -> dict[str, Any]:
        """JSON-ready camelCase body for API responses."""
        return self.model_dump(mode="json", by_alias=True)
