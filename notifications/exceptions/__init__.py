"""Exception types and handlers for the notification engine."""

from notifications.exceptions.downstream_exceptions import (
    DownstreamServiceError,
    DownstreamServiceUnavailableError,
    UserNotFoundError,
)
from notifications.exceptions.handlers import custom_exception_handler
from notifications.exceptions.notification_exceptions import (
    NotificationError,
    NotificationNotFoundError,
    NotificationPersistenceError,
    PreferenceNotFoundError,
)

__all__ = [
    "DownstreamServiceError",
    "DownstreamServiceUnavailableError",
    "NotificationError",
    "NotificationNotFoundError",
    "NotificationPersistenceError",
    "PreferenceNotFoundError",
    "UserNotFoundError",
    "custom_exception_handler",
]
