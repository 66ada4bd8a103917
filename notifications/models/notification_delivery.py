"""NotificationDelivery model for per-channel delivery tracking."""

from typing import ClassVar

from django.db import models
from django.utils import timezone

from notifications.enums import DeliveryChannel, DeliveryStatus


class NotificationDelivery(models.Model):
    """Delivery outcome of one channel for one notification.

    A notification has at most one row per channel. The IN_APP row is
    written together with the canonical notification; EMAIL and REALTIME
    rows record what fan-out did, including deliberate suppression.

    Attributes:
        notification: The canonical notification.
        channel: Delivery channel (IN_APP, EMAIL, REALTIME).
        status: Current delivery status.
        error_message: Failure details for FAILED rows.
        recipient_email: Address used for EMAIL delivery.
        sent_at: When the channel delivered successfully.
        failed_at: When the channel failed.
    """

    notification = models.ForeignKey(
        "notifications.Notification",
        on_delete=models.CASCADE,
        related_name="deliveries",
        db_column="notification_id",
    )
    channel = models.CharField(
        max_length=16,
        choices=[(c.value, c.value) for c in DeliveryChannel],
    )
    status = models.CharField(
        max_length=16,
        choices=[(s.value, s.value) for s in DeliveryStatus],
        default=DeliveryStatus.PENDING.value,
    )
    error_message = models.TextField(null=True, blank=True)
    recipient_email = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        """Django model metadata."""

        db_table = "notification_deliveries"
        managed = False
        ordering: ClassVar[list[str]] = ["-created_at"]
        constraints: ClassVar[list] = [
            models.UniqueConstraint(
                fields=["notification", "channel"],
                name="uniq_delivery_per_channel",
            ),
        ]
        indexes: ClassVar[list] = [
            models.Index(fields=["channel", "status", "created_at"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the delivery."""
        return f"{self.channel} - {self.status}"
