"""Response schema describing an active template."""

from pydantic import Field

from delivery.schemas.base_schema_model import BaseSchemaModel


class TemplateInfo(BaseSchemaModel):
    """Summary of an active notification template."""

    template_key: str = Field(..., description="Template key")
    template_name: str = Field(..., description="Display name")
    is_critical: bool = Field(..., description="Whether the template is critical")
    has_push_content: bool = Field(
        ..., description="Whether push title or body is defined"
    )


class TemplateListResponse(BaseSchemaModel):
    """List of active templates."""

    templates: list[TemplateInfo]
