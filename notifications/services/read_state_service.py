"""Read/unread projection over canonical notifications.

Counts are always computed live from the notifications table; nothing is
cached or denormalized.
"""

from uuid import UUID

from django.db.models import QuerySet

import structlog

from notifications.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from notifications.exceptions import NotificationNotFoundError
from notifications.models import Notification
from notifications.services.clock import SystemClock

logger = structlog.get_logger(__name__)


class ReadStateService:
    """Feed listing and read-state transitions for a user's notifications."""

    def __init__(self, clock: SystemClock | None = None):
        self.clock = clock or SystemClock()

    def _for_user(self, user_id: str) -> QuerySet[Notification]:
        return Notification.objects.filter(user_id=user_id)

    def list_notifications(
        self,
        user_id: str,
        limit: int = DEFAULT_LIST_LIMIT,
        unread_only: bool = False,
    ) -> list[Notification]:
        """Return the user's newest notifications.

        Args:
            user_id: Owner of the feed.
            limit: Maximum number of rows, clamped to 1..100.
            unread_only: Only return unread notifications.
        """
        limit = max(1, min(limit, MAX_LIST_LIMIT))
        queryset = self._for_user(user_id)
        if unread_only:
            queryset = queryset.filter(is_read=False)
        return list(queryset.order_by("-created_at")[:limit])

    def get_notification(self, notification_id: UUID, user_id: str) -> Notification:
        """Return one of the user's notifications.

        Raises:
            NotificationNotFoundError: If no notification matches both ids.
        """
        try:
            return self._for_user(user_id).get(notification_id=notification_id)
        except Notification.DoesNotExist as e:
            raise NotificationNotFoundError(str(notification_id)) from e

    def unread_count(self, user_id: str) -> int:
        return self._for_user(user_id).filter(is_read=False).count()

    def mark_read(self, notification_id: UUID, user_id: str) -> Notification:
        """Mark one notification read.

        Marking an already read notification is a no-op that keeps the
        original ``read_at``. The update is scoped by both ids, so a user
        can never mark another user's notification.

        Raises:
            NotificationNotFoundError: If no notification matches both ids.
        """
        now = self.clock.now()
        updated = (
            self._for_user(user_id)
            .filter(notification_id=notification_id, is_read=False)
            .update(is_read=True, read_at=now, updated_at=now)
        )
        notification = self.get_notification(notification_id, user_id)
        if updated:
            logger.info(
                "notification_marked_read",
                notification_id=str(notification_id),
                user_id=user_id,
            )
        return notification

    def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of the user read.

        Returns:
            Number of notifications that changed.
        """
        now = self.clock.now()
        updated = (
            self._for_user(user_id)
            .filter(is_read=False)
            .update(is_read=True, read_at=now, updated_at=now)
        )
        logger.info("notifications_marked_all_read", user_id=user_id, count=updated)
        return updated


# Global service instance
read_state_service = ReadStateService()
