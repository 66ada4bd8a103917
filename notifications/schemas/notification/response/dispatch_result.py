"""Result of a single dispatch."""

from uuid import UUID

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel


class DispatchResult(BaseSchemaModel):
    """Outcome of dispatching one event to one recipient.

    ``success`` reflects the canonical write only; channel problems and
    deliberate suppressions are listed in ``warnings``.
    """

    success: bool = Field(..., description="Whether the canonical write succeeded")
    notification_id: UUID | None = Field(None, description="Canonical notification")
    warnings: list[str] = Field(default_factory=list)
