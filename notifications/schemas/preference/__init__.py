"""Notification preference schemas."""

from notifications.schemas.preference.category_setting import CategorySetting
from notifications.schemas.preference.preference_response import (
    PreferenceResponse,
)
from notifications.schemas.preference.request.preference_update_request import (
    CategorySettingUpdate,
    PreferenceUpdateRequest,
)

__all__ = [
    "CategorySetting",
    "CategorySettingUpdate",
    "PreferenceResponse",
    "PreferenceUpdateRequest",
]
