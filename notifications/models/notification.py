"""Notification model for the canonical in-app feed entry.

A Notification row is written exactly once per event and recipient by the
dispatcher. After creation only its read-state changes. Per-channel delivery
tracking lives in NotificationDelivery.
"""

import uuid
from typing import ClassVar

from django.db import models
from django.utils import timezone

from notifications.constants import MESSAGE_MAX_LENGTH, TITLE_MAX_LENGTH
from notifications.enums import NotificationCategory


class Notification(models.Model):
    """Canonical notification shown in a user's feed.

    Attributes:
        notification_id: Unique identifier for the notification.
        user_id: Opaque identity of the recipient.
        project_id: Optional project the notification links to.
        notification_type: NotificationCategory value of the originating event.
        title: Short headline shown in the feed.
        message: Body text shown in the feed.
        link: Optional portal-relative link to the subject of the event.
        idempotency_key: Optional caller token; unique per recipient.
        is_read: Whether the recipient has read the notification.
        read_at: When the notification was first marked read.
        created_at: Creation time; sort key for the feed and digests.
        updated_at: When the row was last updated.
    """

    notification_id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the notification",
    )
    user_id = models.CharField(
        max_length=255,
        help_text="Opaque identity of the recipient",
    )
    project_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Project the notification relates to",
    )
    notification_type = models.CharField(
        max_length=32,
        choices=[(c.value, c.value) for c in NotificationCategory],
        help_text="Category of the originating event",
    )
    title = models.CharField(max_length=TITLE_MAX_LENGTH)
    message = models.CharField(max_length=MESSAGE_MAX_LENGTH)
    link = models.CharField(max_length=500, null=True, blank=True)
    idempotency_key = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Caller-supplied token used to drop duplicate dispatches",
    )
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "notifications"
        managed = False
        ordering: ClassVar[list[str]] = ["-created_at"]
        indexes: ClassVar[list] = [
            models.Index(fields=["user_id", "-created_at"]),
            models.Index(fields=["user_id", "is_read", "-created_at"]),
        ]
        constraints: ClassVar[list] = [
            models.UniqueConstraint(
                fields=["user_id", "idempotency_key"],
                name="uniq_notification_idempotency_key",
            ),
        ]

    def __str__(self) -> str:
        """Return string representation of notification."""
        return f"{self.notification_type} for user {self.user_id}"

    def __repr__(self) -> str:
        """Return detailed representation of notification."""
        return (
            f"<Notification(id={self.notification_id}, "
            f"type={self.notification_type}, "
            f"user={self.user_id}, "
            f"is_read={self.is_read})>"
        )
