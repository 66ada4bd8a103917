"""Notification-related enumerations.

This module contains the closed category set used by preferences and
notifications, the user-facing channel selection values, digest
frequencies, and the per-channel delivery tracking values.
"""

from datetime import timedelta
from enum import Enum


class NotificationCategory(str, Enum):
    """Notification categories a user can configure independently.

    The values double as the keys of ``NotificationPreference.preferences``
    and as the ``notification_type`` stored on every notification.
    """

    PROJECT_UPDATES = "projectUpdates"
    MESSAGES = "messages"
    INVOICES = "invoices"
    MILESTONES = "milestones"
    TASKS = "tasks"
    MENTIONS = "mentions"
    GENERAL = "general"


class NotificationChannel(str, Enum):
    """Channel selection values stored in a category preference."""

    IN_APP = "in_app"
    EMAIL = "email"
    BOTH = "both"
    NONE = "none"


class DigestFrequency(str, Enum):
    """How often email is delivered to a user."""

    INSTANT = "instant"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"

    @property
    def window_length(self) -> timedelta:
        """Return the length of a digest window for this frequency.

        Raises:
            ValueError: For INSTANT, which never opens a window.
        """
        if self is DigestFrequency.INSTANT:
            raise ValueError("Instant delivery has no digest window")
        return _WINDOW_LENGTHS[self]


_WINDOW_LENGTHS = {
    DigestFrequency.HOURLY: timedelta(hours=1),
    DigestFrequency.DAILY: timedelta(days=1),
    DigestFrequency.WEEKLY: timedelta(days=7),
}


class DeliveryChannel(str, Enum):
    """Concrete delivery mechanisms tracked per notification."""

    IN_APP = "IN_APP"
    EMAIL = "EMAIL"
    REALTIME = "REALTIME"


class DeliveryStatus(str, Enum):
    """Delivery status values for a single channel of a notification.

    DIGESTED marks an email that waits for the user's next digest window.
    SKIPPED marks a channel whose transport is not configured.
    """

    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"
    SUPPRESSED = "SUPPRESSED"
    DIGESTED = "DIGESTED"
    SKIPPED = "SKIPPED"
