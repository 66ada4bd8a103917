"""User directory schemas."""

from notifications.schemas.user.recipient_contact import RecipientContact

__all__ = ["RecipientContact"]
