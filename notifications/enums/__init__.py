"""Enumerations for the notifications app."""

from notifications.enums.health_status import HealthStatus
from notifications.enums.notification import (
    DeliveryChannel,
    DeliveryStatus,
    DigestFrequency,
    NotificationCategory,
    NotificationChannel,
)

__all__ = [
    "DeliveryChannel",
    "DeliveryStatus",
    "DigestFrequency",
    "HealthStatus",
    "NotificationCategory",
    "NotificationChannel",
]
