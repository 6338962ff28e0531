"""Channel payloads handed to the channel clients."""

from pydantic import Field

from delivery.schemas.base_schema_model import BaseSchemaModel


class EmailPayload(BaseSchemaModel):
    """Rendered email ready for a provider or the relay."""

    to: str = ""
    subject: str = ""
    html: str = ""
    text: str | None = None
    from_email: str | None = None
    from_name: str | None = None
    use_relay: bool | None = Field(
        None, description="Force the relay path for this message"
    )


class PushPayload(BaseSchemaModel):
    """Rendered push notification for one device token."""

    token: str = ""
    title: str = ""
    body: str = ""
    image_url: str | None = None
    data: dict[str, str] | None = None
    click_action: str | None = None
    use_relay: bool | None = Field(
        None, description="Force the relay path for this message"
    )
