"""Realtime push channel mirroring in-app entries to connected clients."""

import structlog

from notifications.channels.base import BaseChannel
from notifications.constants import NEW_NOTIFICATION_EVENT, USER_TOPIC_TEMPLATE
from notifications.enums import DeliveryChannel
from notifications.models import Notification
from notifications.schemas.delivery import DeliveryResult
from notifications.schemas.notification import NotificationEvent, UserNotification
from notifications.services.realtime_client import (
    RealtimeClient,
    RealtimePublishError,
)

logger = structlog.get_logger(__name__)


class RealtimePushChannel(BaseChannel):
    """Best-effort publish of new notifications to the user's private topic."""

    channel = DeliveryChannel.REALTIME

    def __init__(self, client: RealtimeClient | None = None):
        self.client = client or RealtimeClient()

    def deliver(
        self, notification: Notification, event: NotificationEvent
    ) -> DeliveryResult:
        if not self.client.is_configured:
            return DeliveryResult.skip("Realtime transport not configured")

        payload = UserNotification.model_validate(notification).model_dump(
            mode="json", by_alias=True
        )
        try:
            self.client.publish(
                USER_TOPIC_TEMPLATE.format(user_id=notification.user_id),
                NEW_NOTIFICATION_EVENT,
                payload,
            )
        except RealtimePublishError as e:
            return DeliveryResult.failed(e.kind, e.message)
        return DeliveryResult.ok()
