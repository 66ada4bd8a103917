"""Response schema for a user's notification preferences."""

from datetime import datetime

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel
from notifications.schemas.preference.category_setting import CategorySetting


class PreferenceResponse(BaseSchemaModel):
    """A user's stored notification preferences."""

    user_id: str
    is_enabled: bool
    digest_frequency: str
    preferences: dict[str, CategorySetting]
    quiet_hours_enabled: bool
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    email_digest_time: str | None = None
    email_digest_days: list[int] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
