"""Response schema for a user's notification feed."""

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel
from notifications.schemas.notification.response.user_notification import (
    UserNotification,
)


class NotificationListResponse(BaseSchemaModel):
    """Newest-first page of a user's notifications."""

    notifications: list[UserNotification]
    count: int = Field(..., ge=0, description="Number of notifications returned")
    limit: int = Field(..., ge=1, description="Limit applied to the query")
