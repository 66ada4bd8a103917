"""Schema for the unread notification count."""

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel


class UnreadCountResponse(BaseSchemaModel):
    """Unread count computed live from the user's notifications."""

    unread_count: int = Field(..., ge=0)
