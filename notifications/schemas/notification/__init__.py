"""Notification schemas."""

from notifications.schemas.notification.notification_event import NotificationEvent
from notifications.schemas.notification.request.dispatch_request import (
    DispatchRequest,
)
from notifications.schemas.notification.response.dispatch_result import (
    DispatchResult,
)
from notifications.schemas.notification.response.mark_all_read_response import (
    MarkAllReadResponse,
)
from notifications.schemas.notification.response.notification_list_response import (
    NotificationListResponse,
)
from notifications.schemas.notification.response.unread_count_response import (
    UnreadCountResponse,
)
from notifications.schemas.notification.response.user_notification import (
    UserNotification,
)

__all__ = [
    "DispatchRequest",
    "DispatchResult",
    "MarkAllReadResponse",
    "NotificationEvent",
    "NotificationListResponse",
    "UnreadCountResponse",
    "UserNotification",
]
