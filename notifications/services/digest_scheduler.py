"""Digest scheduler batching email for users on hourly, daily or weekly delivery.

A DigestWindow only records boundaries. Its members are the user's EMAIL
deliveries left in DIGESTED status by the dispatcher, created between the
window start and the flush. ``delivered_at`` is only ever written through a
conditional update, and a short claim lease keeps two concurrent flushes
from sending the same window twice.
"""

from datetime import datetime, timedelta

from django.db import IntegrityError, transaction
from django.db.models import Min, Q

import structlog

from notifications.channels import EmailChannel
from notifications.constants import DIGEST_CLAIM_TIMEOUT_SECONDS
from notifications.enums import DeliveryChannel, DeliveryStatus, DigestFrequency
from notifications.models import DigestWindow, Notification, NotificationDelivery
from notifications.services.clock import SystemClock

logger = structlog.get_logger(__name__)


class DigestScheduler:
    """Opens digest windows and flushes the ones that are due."""

    def __init__(
        self,
        email_channel: EmailChannel | None = None,
        clock: SystemClock | None = None,
    ):
        self.email_channel = email_channel or EmailChannel()
        self.clock = clock or SystemClock()

    def enqueue(
        self,
        user_id: str,
        frequency: DigestFrequency | str,
        notification_id=None,
    ) -> DigestWindow:
        """Make sure an open window exists for the user and frequency.

        A new window starts at the notification's creation time so the
        notification falls inside it. Enqueueing into an already open window
        changes nothing.

        Args:
            user_id: Recipient of the digest.
            frequency: Non-instant DigestFrequency.
            notification_id: Notification being deferred, if any.

        Returns:
            The open DigestWindow.
        """
        frequency = DigestFrequency(frequency)
        start = None
        if notification_id is not None:
            start = (
                Notification.objects.filter(notification_id=notification_id)
                .values_list("created_at", flat=True)
                .first()
            )
        return self._ensure_open_window(user_id, frequency, start or self.clock.now())

    def flush_due(self) -> int:
        """Send every digest whose window has ended.

        Returns:
            Number of windows marked delivered by this call.
        """
        now = self.clock.now()
        due_ids = list(
            DigestWindow.objects.filter(
                delivered_at__isnull=True, window_end__lte=now
            ).values_list("pk", flat=True)
        )

        delivered = 0
        for window_id in due_ids:
            # A failing window must not hold back other users' digests
            try:
                flushed = self._flush_window(window_id, now)
            except Exception:
                logger.exception("digest_window_failed", window_id=window_id)
                continue
            if flushed:
                delivered += 1

        logger.info("digest_flush_completed", due=len(due_ids), delivered=delivered)
        return delivered

    def _ensure_open_window(
        self, user_id: str, frequency: DigestFrequency, start: datetime
    ) -> DigestWindow:
        open_window = DigestWindow.objects.filter(
            user_id=user_id, frequency=frequency.value, delivered_at__isnull=True
        ).first()
        if open_window is not None:
            return open_window

        try:
            with transaction.atomic():
                window = DigestWindow.objects.create(
                    user_id=user_id,
                    frequency=frequency.value,
                    window_start=start,
                    window_end=start + frequency.window_length,
                    created_at=self.clock.now(),
                )
        except IntegrityError:
            return DigestWindow.objects.get(
                user_id=user_id, frequency=frequency.value, delivered_at__isnull=True
            )

        logger.info(
            "digest_window_opened",
            user_id=user_id,
            frequency=frequency.value,
            window_end=window.window_end.isoformat(),
        )
        return window

    def _claim(self, window_id: int, now: datetime) -> bool:
        lease_expired = now - timedelta(seconds=DIGEST_CLAIM_TIMEOUT_SECONDS)
        claimed = (
            DigestWindow.objects.filter(pk=window_id, delivered_at__isnull=True)
            .filter(Q(claimed_at__isnull=True) | Q(claimed_at__lt=lease_expired))
            .update(claimed_at=now)
        )
        return claimed == 1

    def _release(self, window_id: int, now: datetime) -> None:
        DigestWindow.objects.filter(
            pk=window_id, claimed_at=now, delivered_at__isnull=True
        ).update(claimed_at=None)

    def _pending_members(self, user_id: str):
        return NotificationDelivery.objects.select_related("notification").filter(
            channel=DeliveryChannel.EMAIL.value,
            status=DeliveryStatus.DIGESTED.value,
            notification__user_id=user_id,
        )

    def _flush_window(self, window_id: int, now: datetime) -> bool:
        if not self._claim(window_id, now):
            logger.debug("digest_window_skipped", window_id=window_id)
            return False

        window = DigestWindow.objects.get(pk=window_id)
        members = list(
            self._pending_members(window.user_id)
            .filter(
                notification__created_at__gte=window.window_start,
                notification__created_at__lte=now,
            )
            .order_by("notification__created_at")
        )

        recipient_email = None
        if members:
            try:
                result = self.email_channel.deliver_digest(
                    window.user_id, [m.notification for m in members], window
                )
            except Exception:
                self._release(window_id, now)
                raise

            if not result.success:
                self._release(window_id, now)
                logger.warning(
                    "digest_send_failed",
                    window_id=window_id,
                    user_id=window.user_id,
                    error_kind=result.error_kind,
                    error=result.error_message,
                )
                return False
            recipient_email = result.recipient_email

        with transaction.atomic():
            marked = DigestWindow.objects.filter(
                pk=window_id, delivered_at__isnull=True
            ).update(delivered_at=now)
            if members:
                NotificationDelivery.objects.filter(
                    pk__in=[m.pk for m in members],
                    status=DeliveryStatus.DIGESTED.value,
                ).update(
                    status=DeliveryStatus.SENT.value,
                    sent_at=now,
                    recipient_email=recipient_email,
                    updated_at=now,
                )

        logger.info(
            "digest_window_delivered",
            window_id=window_id,
            user_id=window.user_id,
            frequency=window.frequency,
            notification_count=len(members),
        )

        self._reopen_for_leftovers(window)
        return marked == 1

    def _reopen_for_leftovers(self, window: DigestWindow) -> None:
        """Open a new window for digest emails that missed the flushed one.

        Covers notifications deferred while the window was being sent.
        """
        oldest = self._pending_members(window.user_id).aggregate(
            oldest=Min("notification__created_at")
        )["oldest"]
        if oldest is not None:
            self._ensure_open_window(
                window.user_id, DigestFrequency(window.frequency), oldest
            )


# Global service instance
digest_scheduler = DigestScheduler()
