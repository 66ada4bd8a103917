"""Email channel rendering notifications and digests for the SMTP transport."""

from django.conf import settings
from django.template.loader import render_to_string

import structlog

from notifications.channels.base import BaseChannel
from notifications.enums import DeliveryChannel, DigestFrequency
from notifications.exceptions import DownstreamServiceError, UserNotFoundError
from notifications.models import DigestWindow, Notification
from notifications.schemas.delivery import DeliveryResult
from notifications.schemas.notification import NotificationEvent
from notifications.schemas.user import RecipientContact
from notifications.services.downstream.user_client import UserClient
from notifications.services.email_service import EmailService

logger = structlog.get_logger(__name__)

NOTIFICATION_TEMPLATE = "emails/notification.html"
DIGEST_TEMPLATE = "emails/digest.html"

DIGEST_SUBJECTS = {
    DigestFrequency.HOURLY.value: "Your hourly notification digest",
    DigestFrequency.DAILY.value: "Your daily notification digest",
    DigestFrequency.WEEKLY.value: "Your weekly notification digest",
}


def absolute_link(link: str | None) -> str | None:
    """Turn a portal-relative link into an absolute front end URL."""
    if not link:
        return None
    if link.startswith(("http://", "https://")):
        return link
    return f"{settings.FRONTEND_BASE_URL.rstrip('/')}/{link.lstrip('/')}"


class EmailChannel(BaseChannel):
    """Sends transactional and digest email to a user's directory address.

    The channel does no database work, so it can run on fan-out threads;
    the caller records the outcome.
    """

    channel = DeliveryChannel.EMAIL

    def __init__(
        self,
        email_service: EmailService | None = None,
        user_client: UserClient | None = None,
    ):
        self.email_service = email_service or EmailService()
        self.user_client = user_client or UserClient()

    def deliver(
        self, notification: Notification, event: NotificationEvent
    ) -> DeliveryResult:
        contact, failure = self._resolve_contact(notification.user_id)
        if failure is not None:
            return failure

        subject = event.email_subject_override or notification.title
        html = render_to_string(
            NOTIFICATION_TEMPLATE,
            {
                "display_name": contact.display_name,
                "title": notification.title,
                "message": notification.message,
                "link_url": absolute_link(notification.link),
            },
        )

        result = self.email_service.send_email(
            to_email=contact.email, subject=subject, html_content=html
        )
        if not result.success:
            return DeliveryResult.failed(
                "transport", result.error_message, recipient_email=contact.email
            )
        return DeliveryResult.ok(recipient_email=contact.email)

    def deliver_digest(
        self,
        user_id: str,
        notifications: list[Notification],
        window: DigestWindow,
    ) -> DeliveryResult:
        """Send one email summarising every notification of a digest window.

        Args:
            user_id: Recipient of the digest.
            notifications: Member notifications, oldest first.
            window: The window being flushed.
        """
        contact, failure = self._resolve_contact(user_id)
        if failure is not None:
            return failure

        html = render_to_string(
            DIGEST_TEMPLATE,
            {
                "display_name": contact.display_name,
                "frequency": window.frequency,
                "window_start": window.window_start,
                "window_end": window.window_end,
                "items": [
                    {
                        "title": n.title,
                        "message": n.message,
                        "created_at": n.created_at,
                        "link_url": absolute_link(n.link),
                    }
                    for n in notifications
                ],
                "count": len(notifications),
            },
        )

        result = self.email_service.send_email(
            to_email=contact.email,
            subject=DIGEST_SUBJECTS.get(window.frequency, "Your notification digest"),
            html_content=html,
        )
        if not result.success:
            return DeliveryResult.failed(
                "transport", result.error_message, recipient_email=contact.email
            )
        return DeliveryResult.ok(recipient_email=contact.email)

    def _resolve_contact(
        self, user_id: str
    ) -> tuple[RecipientContact | None, DeliveryResult | None]:
        try:
            contact = self.user_client.get_contact(user_id)
        except UserNotFoundError:
            return None, DeliveryResult.failed("no-recipient", "User not in directory")
        except DownstreamServiceError as e:
            logger.warning(
                "email_recipient_lookup_failed", user_id=user_id, error=str(e)
            )
            return None, DeliveryResult.failed("directory-unavailable", str(e))

        if not contact.email:
            return None, DeliveryResult.failed("no-email", "User has no email address")
        return contact, None
