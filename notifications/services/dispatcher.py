"""Notification dispatcher.

Turns a NotificationEvent into exactly one canonical Notification for the
recipient and fans it out to email and realtime push according to the
recipient's preferences, quiet hours and digest frequency. Only a store
failure, while resolving preferences or writing the canonical row, can make
a dispatch fail; everything else is reported as a warning on the
DispatchResult.
"""

import contextvars
from concurrent.futures import ThreadPoolExecutor

from django.db import DatabaseError

import structlog

from notifications.channels import (
    BaseChannel,
    EmailChannel,
    InAppChannel,
    RealtimePushChannel,
)
from notifications.constants import (
    WARNING_CATEGORY_DISABLED,
    WARNING_DIGEST_DEFERRED,
    WARNING_DUPLICATE,
    WARNING_GLOBAL_DISABLED,
    WARNING_MISSING_CATEGORY,
    WARNING_QUIET_HOURS,
)
from notifications.enums import (
    DeliveryChannel,
    DeliveryStatus,
    DigestFrequency,
    NotificationChannel,
)
from notifications.exceptions import NotificationPersistenceError
from notifications.models import (
    Notification,
    NotificationDelivery,
    NotificationPreference,
)
from notifications.schemas.delivery import DeliveryResult
from notifications.schemas.notification import DispatchResult, NotificationEvent
from notifications.services.clock import SystemClock
from notifications.services.digest_scheduler import DigestScheduler, digest_scheduler
from notifications.services.preference_service import (
    PreferenceService,
    preference_service,
)
from notifications.services.quiet_hours import is_quiet_time

logger = structlog.get_logger(__name__)


def expand_channels(channels: list[str]) -> set[NotificationChannel]:
    """Expand stored channel selections into concrete in_app/email channels."""
    expanded: set[NotificationChannel] = set()
    for value in channels or []:
        try:
            channel = NotificationChannel(value)
        except ValueError:
            logger.warning("unknown_channel_ignored", channel=value)
            continue
        if channel is NotificationChannel.BOTH:
            expanded.update({NotificationChannel.IN_APP, NotificationChannel.EMAIL})
        elif channel is not NotificationChannel.NONE:
            expanded.add(channel)
    return expanded


class DeliveryPlan:
    """Which channels a single dispatch fans out to."""

    def __init__(self) -> None:
        self.email = False
        self.realtime = False
        self.digest_frequency: DigestFrequency | None = None
        self.suppressed: list[DeliveryChannel] = []
        self.warnings: list[str] = []

    @property
    def digest(self) -> bool:
        return self.digest_frequency is not None


class NotificationDispatcher:
    """Resolves preferences and delivers notifications.

    Collaborators are injected so tests can substitute channel doubles and a
    fixed clock; the defaults are built from Django settings.
    """

    def __init__(
        self,
        preferences: PreferenceService | None = None,
        in_app_channel: InAppChannel | None = None,
        email_channel: BaseChannel | None = None,
        realtime_channel: BaseChannel | None = None,
        scheduler: DigestScheduler | None = None,
        clock: SystemClock | None = None,
        max_workers: int = 2,
    ):
        self.preferences = preferences or preference_service
        self.in_app_channel = in_app_channel or InAppChannel()
        self.email_channel = email_channel or EmailChannel()
        self.realtime_channel = realtime_channel or RealtimePushChannel()
        self.scheduler = scheduler or digest_scheduler
        self.clock = clock or SystemClock()
        self.max_workers = max_workers

    def dispatch(self, event: NotificationEvent) -> DispatchResult:
        """Dispatch one event to its recipient.

        Args:
            event: Validated event descriptor.

        Returns:
            DispatchResult with the canonical notification id and warnings.

        Raises:
            NotificationPersistenceError: If the preferences or the canonical
                notification cannot be read or written.
        """
        user_id = event.recipient_user_id

        if event.idempotency_key:
            existing_id = self._find_duplicate(user_id, event.idempotency_key)
            if existing_id is not None:
                logger.info(
                    "notification_duplicate_ignored",
                    user_id=user_id,
                    notification_id=str(existing_id),
                )
                return DispatchResult(
                    success=True,
                    notification_id=existing_id,
                    warnings=[WARNING_DUPLICATE],
                )

        try:
            preference = self.preferences.get_or_create(user_id)
        except DatabaseError as e:
            logger.error("preference_resolution_failed", user_id=user_id, error=str(e))
            raise NotificationPersistenceError(user_id=user_id, reason=str(e)) from e
        now = self.clock.now()
        plan = self._plan(event, preference, now)

        notification = Notification(
            user_id=user_id,
            project_id=event.project_id,
            notification_type=event.category,
            title=event.title,
            message=event.message,
            link=event.link,
            idempotency_key=event.idempotency_key,
            is_read=False,
            created_at=now,
        )

        try:
            self.in_app_channel.deliver(notification, event)
        except NotificationPersistenceError:
            if event.idempotency_key:
                existing_id = self._find_duplicate(user_id, event.idempotency_key)
                if existing_id is not None:
                    return DispatchResult(
                        success=True,
                        notification_id=existing_id,
                        warnings=[WARNING_DUPLICATE],
                    )
            raise

        warnings = list(plan.warnings)
        for channel in plan.suppressed:
            self._record(notification, channel, DeliveryStatus.SUPPRESSED, now)

        if plan.digest:
            self._record(
                notification, DeliveryChannel.EMAIL, DeliveryStatus.DIGESTED, now
            )
            self.scheduler.enqueue(
                user_id, plan.digest_frequency, notification.notification_id
            )

        warnings.extend(self._fan_out(notification, event, plan))

        logger.info(
            "notification_dispatched",
            notification_id=str(notification.notification_id),
            user_id=user_id,
            category=notification.notification_type,
            email=plan.email,
            realtime=plan.realtime,
            digest=plan.digest,
            warnings=warnings,
        )
        return DispatchResult(
            success=True,
            notification_id=notification.notification_id,
            warnings=warnings,
        )

    def dispatch_many(
        self, user_ids: list[str], **event_fields
    ) -> list[DispatchResult]:
        """Dispatch the same event to several recipients independently.

        Every event is validated before anything is written, so bad fields
        fail the whole call up front. After that a recipient whose dispatch
        fails gets a DispatchResult with ``success=False`` instead of
        stopping the remaining recipients.
        """
        events = [
            NotificationEvent(recipient_user_id=user_id, **event_fields)
            for user_id in user_ids
        ]

        results = []
        for event in events:
            try:
                results.append(self.dispatch(event))
            except (NotificationPersistenceError, DatabaseError) as e:
                logger.error(
                    "notification_dispatch_failed",
                    user_id=event.recipient_user_id,
                    error=str(e),
                )
                results.append(
                    DispatchResult(success=False, warnings=[f"persistence: {e}"])
                )
        return results

    def _plan(
        self,
        event: NotificationEvent,
        preference: NotificationPreference,
        now,
    ) -> DeliveryPlan:
        plan = DeliveryPlan()

        if not preference.is_enabled:
            plan.warnings.append(WARNING_GLOBAL_DISABLED)
            return plan

        setting = preference.category_setting(event.category)
        if setting is None:
            logger.error(
                "preference_category_missing",
                user_id=preference.user_id,
                category=event.category,
            )
            plan.warnings.append(WARNING_MISSING_CATEGORY)
            selected = {NotificationChannel.IN_APP}
        elif not setting.get("enabled", True):
            plan.warnings.append(WARNING_CATEGORY_DISABLED)
            return plan
        else:
            selected = expand_channels(setting.get("channels", []))

        plan.realtime = NotificationChannel.IN_APP in selected
        plan.email = NotificationChannel.EMAIL in selected and event.request_email

        frequency = DigestFrequency(preference.digest_frequency)
        if plan.email and frequency is not DigestFrequency.INSTANT:
            plan.email = False
            plan.digest_frequency = frequency
            plan.warnings.append(WARNING_DIGEST_DEFERRED)

        if (plan.email or plan.realtime) and is_quiet_time(preference, now):
            if plan.email:
                plan.suppressed.append(DeliveryChannel.EMAIL)
            if plan.realtime:
                plan.suppressed.append(DeliveryChannel.REALTIME)
            plan.email = plan.realtime = False
            plan.warnings.append(WARNING_QUIET_HOURS)

        return plan

    def _fan_out(
        self,
        notification: Notification,
        event: NotificationEvent,
        plan: DeliveryPlan,
    ) -> list[str]:
        targets: list[tuple[DeliveryChannel, BaseChannel]] = []
        if plan.email:
            targets.append((DeliveryChannel.EMAIL, self.email_channel))
        if plan.realtime:
            targets.append((DeliveryChannel.REALTIME, self.realtime_channel))
        if not targets:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # Each thread runs in its own copy of the context so log lines
            # keep the request id
            futures = [
                (
                    channel,
                    executor.submit(
                        contextvars.copy_context().run,
                        adapter.deliver,
                        notification,
                        event,
                    ),
                )
                for channel, adapter in targets
            ]
            outcomes = [
                (channel, self._outcome(channel, future))
                for channel, future in futures
            ]

        warnings = []
        for channel, result in outcomes:
            if result.skipped:
                self._record(notification, channel, DeliveryStatus.SKIPPED)
            elif result.success:
                self._record(
                    notification,
                    channel,
                    DeliveryStatus.SENT,
                    self.clock.now(),
                    recipient_email=result.recipient_email,
                )
            else:
                self._record(
                    notification,
                    channel,
                    DeliveryStatus.FAILED,
                    self.clock.now(),
                    error_message=result.error_message,
                    recipient_email=result.recipient_email,
                )
                label = channel.value.lower()
                warnings.append(f"{label}: failed ({result.error_kind})")
                logger.warning(
                    f"{label}_delivery_failed",
                    notification_id=str(notification.notification_id),
                    user_id=notification.user_id,
                    error_kind=result.error_kind,
                    error=result.error_message,
                )
        return warnings

    def _outcome(self, channel: DeliveryChannel, future) -> DeliveryResult:
        try:
            return future.result()
        except Exception as e:
            logger.exception(
                "channel_delivery_crashed", channel=channel.value, error=str(e)
            )
            return DeliveryResult.failed(type(e).__name__, str(e))

    def _record(
        self,
        notification: Notification,
        channel: DeliveryChannel,
        status: DeliveryStatus,
        when=None,
        error_message: str | None = None,
        recipient_email: str | None = None,
    ) -> NotificationDelivery:
        delivery = NotificationDelivery(
            notification=notification,
            channel=channel.value,
            status=status.value,
            error_message=error_message,
            recipient_email=recipient_email,
            created_at=notification.created_at,
        )
        if status is DeliveryStatus.SENT:
            delivery.sent_at = when
        elif status is DeliveryStatus.FAILED:
            delivery.failed_at = when
        delivery.save(force_insert=True)
        return delivery

    def _find_duplicate(self, user_id: str, idempotency_key: str):
        return (
            Notification.objects.filter(
                user_id=user_id, idempotency_key=idempotency_key
            )
            .values_list("notification_id", flat=True)
            .first()
        )


# Global service instance
notification_dispatcher = NotificationDispatcher()
