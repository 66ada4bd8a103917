"""In-app feed channel; writing the feed entry is the canonical persistence."""

from django.db import DatabaseError, transaction

import structlog

from notifications.channels.base import BaseChannel
from notifications.enums import DeliveryChannel, DeliveryStatus
from notifications.exceptions import NotificationPersistenceError
from notifications.models import Notification, NotificationDelivery
from notifications.schemas.delivery import DeliveryResult
from notifications.schemas.notification import NotificationEvent

logger = structlog.get_logger(__name__)


class InAppChannel(BaseChannel):
    """Persists the canonical notification and its IN_APP delivery record."""

    channel = DeliveryChannel.IN_APP

    def deliver(
        self, notification: Notification, event: NotificationEvent
    ) -> DeliveryResult:
        """Insert the unsaved ``notification`` in one transaction.

        Raises:
            NotificationPersistenceError: If the store rejects the write.
        """
        try:
            with transaction.atomic():
                notification.save(force_insert=True)
                NotificationDelivery.objects.create(
                    notification=notification,
                    channel=self.channel.value,
                    status=DeliveryStatus.SENT.value,
                    created_at=notification.created_at,
                    sent_at=notification.created_at,
                )
        except DatabaseError as e:
            logger.error(
                "notification_persist_failed",
                user_id=notification.user_id,
                notification_type=notification.notification_type,
                error=str(e),
            )
            raise NotificationPersistenceError(
                user_id=notification.user_id, reason=str(e)
            ) from e

        return DeliveryResult.ok()
