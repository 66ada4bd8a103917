"""Schema for one category's notification setting."""

from pydantic import Field

from notifications.enums import NotificationChannel
from notifications.schemas.base_schema_model import BaseSchemaModel


class CategorySetting(BaseSchemaModel):
    """Whether a category is enabled and which channels it uses."""

    enabled: bool = Field(True, description="Whether the category notifies at all")
    channels: list[NotificationChannel] = Field(
        default_factory=list, description="Selected channels (in_app/email/both/none)"
    )
