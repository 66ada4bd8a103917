"""Common interface for delivery channels."""

from abc import ABC, abstractmethod

from notifications.enums import DeliveryChannel
from notifications.models import Notification
from notifications.schemas.delivery import DeliveryResult
from notifications.schemas.notification import NotificationEvent


class BaseChannel(ABC):
    """A way of getting a notification in front of its recipient."""

    channel: DeliveryChannel

    @abstractmethod
    def deliver(
        self, notification: Notification, event: NotificationEvent
    ) -> DeliveryResult:
        """Deliver one notification.

        Args:
            notification: The canonical notification.
            event: The event the notification was created from.

        Returns:
            DeliveryResult describing the outcome.
        """
