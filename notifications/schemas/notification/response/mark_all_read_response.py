"""Schema for the mark-all-read result."""

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel


class MarkAllReadResponse(BaseSchemaModel):
    """Number of notifications that changed from unread to read."""

    updated_count: int = Field(..., ge=0)
