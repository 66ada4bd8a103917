"""Database models for the notifications app."""

from notifications.models.digest_window import DigestWindow
from notifications.models.notification import Notification
from notifications.models.notification_delivery import NotificationDelivery
from notifications.models.notification_preference import NotificationPreference

__all__ = [
    "DigestWindow",
    "Notification",
    "NotificationDelivery",
    "NotificationPreference",
]
