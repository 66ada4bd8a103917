"""Schema for a notification in a user's feed."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel


class UserNotification(BaseSchemaModel):
    """Schema for a notification in a user's feed."""

    notification_id: UUID = Field(..., description="Unique notification identifier")
    user_id: str = Field(..., description="Recipient of the notification")
    project_id: str | None = Field(None, description="Related project")
    notification_type: str = Field(..., description="Category of the event")
    title: str
    message: str
    link: str | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime
