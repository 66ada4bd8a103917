"""Result of handing one email to the SMTP transport."""

from notifications.schemas.base_schema_model import BaseSchemaModel


class EmailSendResult(BaseSchemaModel):
    """Whether the transport accepted the message."""

    success: bool
    error_message: str | None = None
