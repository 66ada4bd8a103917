"""Email transport sending HTML mail over SMTP."""

import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from django.conf import settings

import structlog

from notifications.schemas.delivery import EmailSendResult

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


class EmailService:
    """SMTP transport for outbound notification email.

    Every call opens its own connection bounded by ``EMAIL_TIMEOUT``, so the
    service is safe to share between the dispatcher's fan-out threads.
    Transport problems are reported in the returned EmailSendResult rather
    than raised; callers decide what a failure means.
    """

    def __init__(self) -> None:
        """Initialize email service with SMTP configuration."""
        self.smtp_host = settings.EMAIL_HOST
        self.smtp_port = settings.EMAIL_PORT
        self.smtp_user = settings.EMAIL_HOST_USER
        self.smtp_password = settings.EMAIL_HOST_PASSWORD
        self.use_tls = settings.EMAIL_USE_TLS
        self.from_email = settings.DEFAULT_FROM_EMAIL
        self.timeout = settings.EMAIL_TIMEOUT

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        from_email: str | None = None,
    ) -> EmailSendResult:
        """Send an HTML email with a plain text alternative.

        Args:
            to_email: Recipient email address
            subject: Email subject line
            html_content: HTML email content
            from_email: Sender email (defaults to DEFAULT_FROM_EMAIL)

        Returns:
            EmailSendResult; ``success`` is False for invalid addresses,
            SMTP errors and timeouts.
        """
        if not self._is_valid_email(to_email):
            logger.warning("email_address_invalid", to_email=to_email)
            return EmailSendResult(
                success=False, error_message=f"Invalid email address: {to_email}"
            )

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = from_email or self.from_email
        msg["To"] = to_email
        msg.attach(MIMEText(self._html_to_plain(html_content), "plain"))
        msg.attach(MIMEText(html_content, "html"))

        try:
            with smtplib.SMTP(
                self.smtp_host, self.smtp_port, timeout=self.timeout
            ) as server:
                if self.use_tls:
                    server.starttls()

                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)

                server.send_message(msg)

        except TimeoutError:
            logger.error(
                "email_send_timeout",
                to_email=to_email,
                subject=subject,
                timeout=self.timeout,
            )
            return EmailSendResult(
                success=False, error_message=f"SMTP timed out after {self.timeout}s"
            )
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "email_send_failed",
                to_email=to_email,
                subject=subject,
                error=str(e),
            )
            return EmailSendResult(success=False, error_message=str(e))

        logger.info("email_sent", to_email=to_email, subject=subject)
        return EmailSendResult(success=True)

    def _is_valid_email(self, email: str) -> bool:
        return bool(EMAIL_PATTERN.match(email))

    def _html_to_plain(self, html: str) -> str:
        """Convert HTML to plain text.

        Args:
            html: HTML content

        Returns:
            Plain text version of the HTML
        """
        text = re.sub(r"<(br|/p|/h[1-6]|/li)[^>]*>", "\n", html, flags=re.IGNORECASE)
        text = re.sub(r"<[^>]+>", "", text)

        text = text.replace("&nbsp;", " ")
        text = text.replace("&lt;", "<")
        text = text.replace("&gt;", ">")
        text = text.replace("&quot;", '"')
        text = text.replace("&#x27;", "'")
        text = text.replace("&amp;", "&")

        text = re.sub(r"[ \t]+\n", "\n", text)
        text = re.sub(r"\n\s*\n+", "\n\n", text)
        return text.strip()
