"""Response body schemas for the HTTP API."""

from delivery.schemas.response.template_info import TemplateInfo, TemplateListResponse

__all__ = ["TemplateInfo", "TemplateListResponse"]
