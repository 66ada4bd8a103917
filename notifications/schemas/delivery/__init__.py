"""Channel delivery outcome schemas."""

from notifications.schemas.delivery.delivery_result import DeliveryResult
from notifications.schemas.delivery.email_send_result import EmailSendResult

__all__ = ["DeliveryResult", "EmailSendResult"]
