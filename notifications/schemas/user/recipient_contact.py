"""Recipient contact schema from the user directory."""

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel


class RecipientContact(BaseSchemaModel):
    """Contact details needed to reach a user outside the portal.

    Matches the GET /users/{user_id} response of the user directory.
    """

    user_id: str = Field(..., description="Identity of the user")
    email: str | None = Field(None, description="Verified email address")
    display_name: str | None = Field(None, description="Name used in greetings")
