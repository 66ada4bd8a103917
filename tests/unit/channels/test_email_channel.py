"""Tests for EmailChannel."""

from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

from django.test import SimpleTestCase

from notifications.channels import EmailChannel
from notifications.channels.email import absolute_link
from notifications.exceptions import (
    DownstreamServiceUnavailableError,
    UserNotFoundError,
)
from notifications.models import DigestWindow, Notification
from notifications.schemas.delivery import EmailSendResult
from notifications.schemas.notification import NotificationEvent
from notifications.schemas.user import RecipientContact

CREATED = datetime(2026, 3, 14, 9, 30, tzinfo=UTC)


class EmailChannelTestCase(SimpleTestCase):
    """Channel wired to mocked transport and directory."""

    def setUp(self):
        """Set up test fixtures."""
        self.email_service = Mock()
        self.email_service.send_email.return_value = EmailSendResult(success=True)
        self.user_client = Mock()
        self.user_client.get_contact.return_value = RecipientContact(
            user_id="user_1", email="client@example.com", display_name="Jordan"
        )
        self.channel = EmailChannel(
            email_service=self.email_service, user_client=self.user_client
        )
        self.notification = Notification(
            user_id="user_1",
            notification_type="invoices",
            title="New Invoice",
            message="Invoice INV-7 for $1,250.00 has been sent.",
            link="/dashboard/projects/p-1",
            created_at=CREATED,
        )
        self.event = NotificationEvent(
            recipient_user_id="user_1",
            category="invoices",
            title="New Invoice",
            message="Invoice INV-7 for $1,250.00 has been sent.",
            request_email=True,
            email_subject_override="Invoice INV-7 - $1,250.00",
        )


class TestDeliver(EmailChannelTestCase):
    """Single notification email."""

    def test_sends_rendered_email_to_directory_address(self):
        result = self.channel.deliver(self.notification, self.event)

        self.assertTrue(result.success)
        self.assertEqual(result.recipient_email, "client@example.com")
        kwargs = self.email_service.send_email.call_args.kwargs
        self.assertEqual(kwargs["to_email"], "client@example.com")
        self.assertEqual(kwargs["subject"], "Invoice INV-7 - $1,250.00")
        self.assertIn("Hi Jordan", kwargs["html_content"])
        self.assertIn(
            "https://portal.test.local/dashboard/projects/p-1",
            kwargs["html_content"],
        )

    def test_subject_defaults_to_title(self):
        event = self.event.model_copy(update={"email_subject_override": None})

        self.channel.deliver(self.notification, event)

        self.assertEqual(
            self.email_service.send_email.call_args.kwargs["subject"], "New Invoice"
        )

    def test_unknown_user(self):
        self.user_client.get_contact.side_effect = UserNotFoundError("user_1")

        result = self.channel.deliver(self.notification, self.event)

        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, "no-recipient")
        self.email_service.send_email.assert_not_called()

    def test_directory_unavailable(self):
        self.user_client.get_contact.side_effect = DownstreamServiceUnavailableError(
            "user-directory"
        )

        result = self.channel.deliver(self.notification, self.event)

        self.assertEqual(result.error_kind, "directory-unavailable")

    def test_user_without_email(self):
        self.user_client.get_contact.return_value = RecipientContact(user_id="user_1")

        result = self.channel.deliver(self.notification, self.event)

        self.assertEqual(result.error_kind, "no-email")
        self.email_service.send_email.assert_not_called()

    def test_transport_failure(self):
        self.email_service.send_email.return_value = EmailSendResult(
            success=False, error_message="SMTP timed out after 1s"
        )

        result = self.channel.deliver(self.notification, self.event)

        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, "transport")
        self.assertEqual(result.error_message, "SMTP timed out after 1s")
        self.assertEqual(result.recipient_email, "client@example.com")


class TestDeliverDigest(EmailChannelTestCase):
    """Digest email covering a window."""

    def test_digest_lists_every_notification(self):
        second = Notification(
            user_id="user_1",
            notification_type="messages",
            title="New Message",
            message="Alex sent you a message",
            created_at=CREATED + timedelta(hours=1),
        )
        window = DigestWindow(
            user_id="user_1",
            frequency="daily",
            window_start=CREATED,
            window_end=CREATED + timedelta(days=1),
        )

        result = self.channel.deliver_digest(
            "user_1", [self.notification, second], window
        )

        self.assertTrue(result.success)
        kwargs = self.email_service.send_email.call_args.kwargs
        self.assertEqual(kwargs["subject"], "Your daily notification digest")
        html = kwargs["html_content"]
        self.assertIn("2 notifications", html)
        self.assertIn("New Invoice", html)
        self.assertIn("New Message", html)


class TestAbsoluteLink(SimpleTestCase):
    def test_relative_link(self):
        self.assertEqual(
            absolute_link("/dashboard/messages"),
            "https://portal.test.local/dashboard/messages",
        )

    def test_absolute_and_empty_links(self):
        self.assertEqual(absolute_link("https://x.test/a"), "https://x.test/a")
        self.assertIsNone(absolute_link(None))
