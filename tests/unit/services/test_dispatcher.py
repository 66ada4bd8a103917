"""Tests for NotificationDispatcher."""

from datetime import UTC, datetime
from unittest.mock import Mock

from django.db import DatabaseError
from django.test import TestCase

from pydantic import ValidationError

from notifications.channels import InAppChannel
from notifications.enums import (
    DeliveryChannel,
    DeliveryStatus,
    NotificationCategory,
    NotificationChannel,
)
from notifications.exceptions import NotificationPersistenceError
from notifications.models import DigestWindow, Notification, NotificationDelivery
from notifications.schemas.delivery import DeliveryResult
from notifications.schemas.notification import NotificationEvent
from notifications.services.digest_scheduler import DigestScheduler
from notifications.services.dispatcher import NotificationDispatcher, expand_channels
from notifications.services.preference_service import PreferenceService
from tests.doubles import FixedClock, RecordingChannel, RecordingEmailChannel
from tests.factories import NotificationFactory, NotificationPreferenceFactory

NOON = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)


def _event(**overrides):
    fields = {
        "recipient_user_id": "user_1",
        "category": NotificationCategory.MESSAGES,
        "title": "New Message",
        "message": "Alex sent you a message",
        "link": "/dashboard/messages",
        "request_email": True,
    }
    fields.update(overrides)
    return NotificationEvent(**fields)


class DispatcherTestCase(TestCase):
    """Dispatcher wired to a real in-app channel and channel doubles."""

    def setUp(self):
        """Set up test fixtures."""
        self.clock = FixedClock(NOON)
        self.email = RecordingEmailChannel()
        self.realtime = RecordingChannel(DeliveryChannel.REALTIME)
        self.scheduler = DigestScheduler(email_channel=self.email, clock=self.clock)
        self.dispatcher = NotificationDispatcher(
            in_app_channel=InAppChannel(),
            email_channel=self.email,
            realtime_channel=self.realtime,
            scheduler=self.scheduler,
            clock=self.clock,
        )

    def _set_category(self, user_id, category, enabled=True, channels=None):
        preference = NotificationPreferenceFactory(user_id=user_id)
        preference.preferences[category] = {
            "enabled": enabled,
            "channels": channels if channels is not None else ["both"],
        }
        preference.save()
        return preference

    def _statuses(self, notification_id):
        return dict(
            NotificationDelivery.objects.filter(
                notification_id=notification_id
            ).values_list("channel", "status")
        )


class TestExpandChannels(TestCase):
    """Channel selection expansion."""

    def test_both_expands_to_in_app_and_email(self):
        self.assertEqual(
            expand_channels(["both"]),
            {NotificationChannel.IN_APP, NotificationChannel.EMAIL},
        )

    def test_none_and_unknown_values_select_nothing(self):
        self.assertEqual(expand_channels(["none", "sms"]), set())

    def test_duplicates_collapse(self):
        self.assertEqual(
            expand_channels(["email", "both"]),
            {NotificationChannel.IN_APP, NotificationChannel.EMAIL},
        )


class TestDispatchDefaults(DispatcherTestCase):
    """First dispatch to a user with no stored preferences."""

    def test_message_goes_to_feed_email_and_realtime(self):
        """Messages default to both channels."""
        result = self.dispatcher.dispatch(_event())

        self.assertTrue(result.success)
        self.assertEqual(result.warnings, [])
        notification = Notification.objects.get(notification_id=result.notification_id)
        self.assertEqual(notification.user_id, "user_1")
        self.assertEqual(notification.notification_type, "messages")
        self.assertFalse(notification.is_read)
        self.assertEqual(self.email.call_count, 1)
        self.assertEqual(self.realtime.call_count, 1)
        self.assertEqual(
            self._statuses(result.notification_id),
            {"IN_APP": "SENT", "EMAIL": "SENT", "REALTIME": "SENT"},
        )

    def test_email_delivery_records_recipient(self):
        """The address the email went to is kept on the delivery row."""
        result = self.dispatcher.dispatch(_event())

        delivery = NotificationDelivery.objects.get(
            notification_id=result.notification_id, channel="EMAIL"
        )
        self.assertEqual(delivery.recipient_email, "client@example.com")
        self.assertEqual(delivery.sent_at, NOON)

    def test_created_at_comes_from_clock(self):
        """Canonical rows carry the injected time."""
        result = self.dispatcher.dispatch(_event())

        notification = Notification.objects.get(notification_id=result.notification_id)
        self.assertEqual(notification.created_at, NOON)

    def test_in_app_only_category_skips_email(self):
        """Milestones default to the feed only."""
        result = self.dispatcher.dispatch(
            _event(category=NotificationCategory.MILESTONES)
        )

        self.assertTrue(result.success)
        self.assertEqual(self.email.call_count, 0)
        self.assertEqual(self.realtime.call_count, 1)
        self.assertEqual(
            self._statuses(result.notification_id),
            {"IN_APP": "SENT", "REALTIME": "SENT"},
        )

    def test_request_email_false_never_sends_email(self):
        """Events that do not warrant email stay in-app."""
        result = self.dispatcher.dispatch(_event(request_email=False))

        self.assertEqual(result.warnings, [])
        self.assertEqual(self.email.call_count, 0)
        self.assertEqual(self.realtime.call_count, 1)

    def test_first_dispatch_creates_preferences(self):
        """The preference record is created lazily."""
        self.dispatcher.dispatch(_event(recipient_user_id="user_fresh"))

        self.assertTrue(
            self.dispatcher.preferences.get("user_fresh").preferences["messages"]
        )


class TestDispatchPreferences(DispatcherTestCase):
    """Preference driven channel selection."""

    def test_global_disable_keeps_feed_entry(self):
        """Disabled users still get the canonical notification."""
        NotificationPreferenceFactory(user_id="user_1", is_enabled=False)

        result = self.dispatcher.dispatch(_event())

        self.assertTrue(result.success)
        self.assertEqual(result.warnings, ["suppressed: global-disabled"])
        self.assertTrue(
            Notification.objects.filter(notification_id=result.notification_id).exists()
        )
        self.assertEqual(self.email.call_count, 0)
        self.assertEqual(self.realtime.call_count, 0)
        self.assertEqual(self._statuses(result.notification_id), {"IN_APP": "SENT"})

    def test_category_disable(self):
        """A disabled category produces only the feed entry."""
        self._set_category("user_1", "messages", enabled=False)

        result = self.dispatcher.dispatch(_event())

        self.assertEqual(result.warnings, ["suppressed: category-disabled"])
        self.assertEqual(self.email.call_count, 0)
        self.assertEqual(self.realtime.call_count, 0)

    def test_channels_none(self):
        """Selecting no channel keeps only the feed entry, without warnings."""
        self._set_category("user_1", "messages", channels=["none"])

        result = self.dispatcher.dispatch(_event())

        self.assertEqual(result.warnings, [])
        self.assertEqual(self.email.call_count, 0)
        self.assertEqual(self.realtime.call_count, 0)

    def test_email_only(self):
        """Email without in_app skips the realtime push."""
        self._set_category("user_1", "messages", channels=["email"])

        result = self.dispatcher.dispatch(_event())

        self.assertEqual(self.email.call_count, 1)
        self.assertEqual(self.realtime.call_count, 0)
        self.assertEqual(
            self._statuses(result.notification_id),
            {"IN_APP": "SENT", "EMAIL": "SENT"},
        )

    def test_missing_category_falls_back_to_in_app(self):
        """A missing category key is reported and treated as in_app only."""
        preference = NotificationPreferenceFactory(user_id="user_1")
        del preference.preferences["messages"]
        preference.save()

        result = self.dispatcher.dispatch(_event())

        self.assertTrue(result.success)
        self.assertEqual(result.warnings, ["integrity: missing-category"])
        self.assertEqual(self.email.call_count, 0)
        self.assertEqual(self.realtime.call_count, 1)


class TestDispatchQuietHours(DispatcherTestCase):
    """Quiet hours suppress email and realtime but never the feed."""

    def setUp(self):
        """Set up test fixtures."""
        super().setUp()
        NotificationPreferenceFactory(
            user_id="user_1",
            quiet_hours_enabled=True,
            quiet_hours_start="22:00",
            quiet_hours_end="06:00",
        )

    def test_inside_quiet_hours(self):
        """At 23:30 both channels are suppressed."""
        self.clock.current = datetime(2026, 3, 14, 23, 30, tzinfo=UTC)

        result = self.dispatcher.dispatch(_event())

        self.assertTrue(result.success)
        self.assertEqual(result.warnings, ["suppressed: quiet-hours"])
        self.assertEqual(self.email.call_count, 0)
        self.assertEqual(self.realtime.call_count, 0)
        self.assertEqual(
            self._statuses(result.notification_id),
            {"IN_APP": "SENT", "EMAIL": "SUPPRESSED", "REALTIME": "SUPPRESSED"},
        )

    def test_digest_user_inside_quiet_hours(self):
        """Deferred email still joins the digest; the push is suppressed."""
        preference = self.dispatcher.preferences.get("user_1")
        preference.digest_frequency = "daily"
        preference.save()
        self.clock.current = datetime(2026, 3, 14, 2, 0, tzinfo=UTC)

        result = self.dispatcher.dispatch(_event())

        self.assertEqual(
            result.warnings, ["deferred: digest", "suppressed: quiet-hours"]
        )
        self.assertEqual(
            self._statuses(result.notification_id),
            {"IN_APP": "SENT", "EMAIL": "DIGESTED", "REALTIME": "SUPPRESSED"},
        )
        self.assertTrue(DigestWindow.objects.filter(user_id="user_1").exists())

    def test_outside_quiet_hours(self):
        """At noon delivery proceeds normally."""
        result = self.dispatcher.dispatch(_event())

        self.assertEqual(result.warnings, [])
        self.assertEqual(self.email.call_count, 1)
        self.assertEqual(self.realtime.call_count, 1)


class TestDispatchDigest(DispatcherTestCase):
    """Non-instant digest frequency defers email."""

    def test_daily_digest_defers_email(self):
        """Email is recorded as DIGESTED and a window is opened."""
        NotificationPreferenceFactory(user_id="user_1", digest_frequency="daily")

        result = self.dispatcher.dispatch(_event())

        self.assertEqual(result.warnings, ["deferred: digest"])
        self.assertEqual(self.email.call_count, 0)
        self.assertEqual(self.realtime.call_count, 1)
        self.assertEqual(
            self._statuses(result.notification_id),
            {"IN_APP": "SENT", "EMAIL": "DIGESTED", "REALTIME": "SENT"},
        )
        window = DigestWindow.objects.get(user_id="user_1")
        self.assertEqual(window.frequency, "daily")
        self.assertEqual(window.window_start, NOON)

    def test_digest_ignores_events_without_email(self):
        """Nothing is deferred when the event does not want email."""
        NotificationPreferenceFactory(user_id="user_1", digest_frequency="hourly")

        result = self.dispatcher.dispatch(_event(request_email=False))

        self.assertEqual(result.warnings, [])
        self.assertFalse(DigestWindow.objects.exists())


class TestDispatchChannelFailures(DispatcherTestCase):
    """Channel failures become warnings, never dispatch failures."""

    def test_email_failure(self):
        """A failed send is recorded and reported by kind."""
        self.email.result = DeliveryResult.failed(
            "transport", "550 mailbox unavailable", recipient_email="a@example.com"
        )

        result = self.dispatcher.dispatch(_event())

        self.assertTrue(result.success)
        self.assertEqual(result.warnings, ["email: failed (transport)"])
        delivery = NotificationDelivery.objects.get(
            notification_id=result.notification_id, channel="EMAIL"
        )
        self.assertEqual(delivery.status, DeliveryStatus.FAILED.value)
        self.assertEqual(delivery.error_message, "550 mailbox unavailable")
        self.assertEqual(delivery.failed_at, NOON)
        self.assertEqual(self.realtime.call_count, 1)

    def test_realtime_exception(self):
        """A crashing channel is reported by exception type."""
        self.realtime.error = RuntimeError("socket closed")

        result = self.dispatcher.dispatch(_event())

        self.assertTrue(result.success)
        self.assertEqual(result.warnings, ["realtime: failed (RuntimeError)"])
        self.assertEqual(
            self._statuses(result.notification_id)["REALTIME"], "FAILED"
        )
        self.assertEqual(self._statuses(result.notification_id)["EMAIL"], "SENT")

    def test_unconfigured_realtime_is_skipped(self):
        """Skipped channels are recorded without a warning."""
        self.realtime.result = DeliveryResult.skip("not configured")

        result = self.dispatcher.dispatch(_event())

        self.assertEqual(result.warnings, [])
        self.assertEqual(
            self._statuses(result.notification_id)["REALTIME"], "SKIPPED"
        )


class TestDispatchPersistence(DispatcherTestCase):
    """Canonical write failures and idempotency."""

    def test_persistence_failure_propagates(self):
        """No fan-out happens when the feed entry cannot be written."""
        failing = Mock(spec=InAppChannel)
        failing.deliver.side_effect = NotificationPersistenceError(
            user_id="user_1", reason="disk full"
        )
        self.dispatcher.in_app_channel = failing

        with self.assertRaises(NotificationPersistenceError):
            self.dispatcher.dispatch(_event())

        self.assertEqual(self.email.call_count, 0)
        self.assertEqual(self.realtime.call_count, 0)
        self.assertFalse(Notification.objects.exists())

    def test_repeated_idempotency_key_is_a_no_op(self):
        """The second dispatch returns the first notification."""
        first = self.dispatcher.dispatch(_event(idempotency_key="invoice-42"))
        second = self.dispatcher.dispatch(_event(idempotency_key="invoice-42"))

        self.assertEqual(second.notification_id, first.notification_id)
        self.assertEqual(second.warnings, ["duplicate: idempotency-key"])
        self.assertEqual(Notification.objects.filter(user_id="user_1").count(), 1)
        self.assertEqual(self.email.call_count, 1)

    def test_idempotency_key_is_scoped_per_user(self):
        """Another recipient may reuse the same key."""
        self.dispatcher.dispatch(_event(idempotency_key="invoice-42"))
        other = self.dispatcher.dispatch(
            _event(recipient_user_id="user_2", idempotency_key="invoice-42")
        )

        self.assertEqual(other.warnings, [])
        self.assertEqual(Notification.objects.count(), 2)

    def test_lost_insert_race_returns_winner(self):
        """A unique-key conflict on insert resolves to the existing row."""
        existing = NotificationFactory(user_id="user_1", idempotency_key="k-1")
        self.dispatcher._find_duplicate = Mock(
            side_effect=[None, existing.notification_id]
        )

        result = self.dispatcher.dispatch(_event(idempotency_key="k-1"))

        self.assertEqual(result.notification_id, existing.notification_id)
        self.assertEqual(result.warnings, ["duplicate: idempotency-key"])
        self.assertEqual(self.email.call_count, 0)


class TestDispatchMany(DispatcherTestCase):
    """Multi-recipient dispatch."""

    def test_each_recipient_gets_own_notification(self):
        results = self.dispatcher.dispatch_many(
            ["user_1", "user_2", "user_3"],
            category=NotificationCategory.PROJECT_UPDATES,
            title="Project Update: Website",
            message="Design phase complete",
        )

        self.assertEqual(len(results), 3)
        self.assertTrue(all(r.success for r in results))
        self.assertEqual(
            len({r.notification_id for r in results}), 3
        )
        self.assertEqual(Notification.objects.count(), 3)

    def test_failure_for_one_recipient_does_not_stop_others(self):
        """A persistence failure becomes an unsuccessful result."""
        real_in_app = InAppChannel()
        calls = []

        def deliver(notification, event):
            calls.append(notification.user_id)
            if notification.user_id == "user_2":
                raise NotificationPersistenceError(user_id="user_2", reason="boom")
            return real_in_app.deliver(notification, event)

        self.dispatcher.in_app_channel = Mock(deliver=Mock(side_effect=deliver))

        results = self.dispatcher.dispatch_many(
            ["user_1", "user_2", "user_3"],
            category=NotificationCategory.GENERAL,
            title="Maintenance",
            message="Portal maintenance tonight",
        )

        self.assertEqual([r.success for r in results], [True, False, True])
        self.assertIsNone(results[1].notification_id)
        self.assertTrue(results[1].warnings[0].startswith("persistence: "))
        self.assertEqual(calls, ["user_1", "user_2", "user_3"])
        self.assertEqual(Notification.objects.count(), 2)

    def test_preference_store_failure_for_one_recipient_does_not_stop_others(self):
        """A store error while resolving preferences fails only that recipient."""
        real_preferences = PreferenceService()

        def get_or_create(user_id):
            if user_id == "user_2":
                raise DatabaseError("connection reset")
            return real_preferences.get_or_create(user_id)

        self.dispatcher.preferences = Mock(
            get_or_create=Mock(side_effect=get_or_create)
        )

        results = self.dispatcher.dispatch_many(
            ["user_1", "user_2", "user_3"],
            category=NotificationCategory.GENERAL,
            title="Maintenance",
            message="Portal maintenance tonight",
        )

        self.assertEqual([r.success for r in results], [True, False, True])
        self.assertIn("connection reset", results[1].warnings[0])
        self.assertEqual(
            sorted(Notification.objects.values_list("user_id", flat=True)),
            ["user_1", "user_3"],
        )

    def test_invalid_fields_fail_before_any_write(self):
        """Event validation happens for every recipient before dispatching."""
        with self.assertRaises(ValidationError):
            self.dispatcher.dispatch_many(
                ["user_1", ""],
                category=NotificationCategory.GENERAL,
                title="Maintenance",
                message="Portal maintenance tonight",
            )

        self.assertEqual(Notification.objects.count(), 0)


class TestDispatchPreferenceFailure(DispatcherTestCase):
    """Store errors while resolving preferences."""

    def test_store_error_is_raised_as_persistence_error(self):
        self.dispatcher.preferences = Mock(
            get_or_create=Mock(side_effect=DatabaseError("connection reset"))
        )

        with self.assertRaises(NotificationPersistenceError) as ctx:
            self.dispatcher.dispatch(_event())

        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)
        self.assertEqual(Notification.objects.count(), 0)
        self.assertEqual(self.email.delivered, [])
