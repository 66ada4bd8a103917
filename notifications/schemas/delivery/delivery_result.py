"""Outcome of a single channel delivery attempt."""

from notifications.schemas.base_schema_model import BaseSchemaModel


class DeliveryResult(BaseSchemaModel):
    """What a channel adapter reports back to the dispatcher.

    ``error_kind`` is a short machine-readable label (for example
    ``timeout`` or ``no-recipient``) used in dispatch warnings.
    """

    success: bool
    skipped: bool = False
    error_kind: str | None = None
    error_message: str | None = None
    recipient_email: str | None = None

    @classmethod
    def ok(cls, recipient_email: str | None = None) -> "DeliveryResult":
        return cls(success=True, recipient_email=recipient_email)

    @classmethod
    def skip(cls, reason: str) -> "DeliveryResult":
        return cls(success=True, skipped=True, error_message=reason)

    @classmethod
    def failed(
        cls,
        kind: str,
        message: str | None = None,
        recipient_email: str | None = None,
    ) -> "DeliveryResult":
        return cls(
            success=False,
            error_kind=kind,
            error_message=message or kind,
            recipient_email=recipient_email,
        )
