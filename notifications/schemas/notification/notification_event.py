"""Event descriptor accepted by the notification dispatcher."""

from pydantic import Field

from notifications.constants import MESSAGE_MAX_LENGTH, TITLE_MAX_LENGTH
from notifications.enums import NotificationCategory
from notifications.schemas.base_schema_model import BaseSchemaModel


class NotificationEvent(BaseSchemaModel):
    """Something happened that a user may need to hear about.

    The event is not persisted; the dispatcher turns it into one canonical
    Notification for the recipient and decides which channels to use.
    """

    recipient_user_id: str = Field(
        ..., min_length=1, description="Identity of the user to notify"
    )
    category: NotificationCategory = Field(
        ..., description="Preference category the event belongs to"
    )
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    message: str = Field(..., min_length=1, max_length=MESSAGE_MAX_LENGTH)
    link: str | None = Field(
        None, max_length=500, description="Portal-relative link, e.g. /dashboard/..."
    )
    project_id: str | None = Field(None, description="Related project")
    request_email: bool = Field(
        False, description="Whether the event warrants an email at all"
    )
    email_subject_override: str | None = Field(
        None, max_length=TITLE_MAX_LENGTH, description="Email subject to use"
    )
    idempotency_key: str | None = Field(
        None,
        max_length=255,
        description="Caller token; a repeated token for the same user is a no-op",
    )
