"""Request schema for partial preference updates."""

from typing import Annotated

from pydantic import ConfigDict, Field

from notifications.constants import TIME_OF_DAY_PATTERN
from notifications.enums import (
    DigestFrequency,
    NotificationCategory,
    NotificationChannel,
)
from notifications.schemas.base_schema_model import BaseSchemaModel

TimeOfDay = Annotated[str, Field(pattern=TIME_OF_DAY_PATTERN)]
Weekday = Annotated[int, Field(ge=0, le=6)]


class CategorySettingUpdate(BaseSchemaModel):
    """Partial update of one category; omitted fields keep their value."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool | None = None
    channels: list[NotificationChannel] | None = None


class PreferenceUpdateRequest(BaseSchemaModel):
    """Partial update of a user's preferences.

    Only fields present in the payload are applied. Category keys must
    belong to the closed NotificationCategory set; anything else is a
    validation error rather than a silently stored key.
    """

    model_config = ConfigDict(extra="forbid")

    is_enabled: bool | None = None
    digest_frequency: DigestFrequency | None = None
    preferences: dict[NotificationCategory, CategorySettingUpdate] | None = None
    quiet_hours_enabled: bool | None = None
    quiet_hours_start: TimeOfDay | None = None
    quiet_hours_end: TimeOfDay | None = None
    email_digest_time: TimeOfDay | None = None
    email_digest_days: list[Weekday] | None = Field(None, max_length=7)
