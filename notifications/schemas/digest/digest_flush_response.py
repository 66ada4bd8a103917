"""Schema for the digest flush result."""

from pydantic import Field

from notifications.schemas.base_schema_model import BaseSchemaModel


class DigestFlushResponse(BaseSchemaModel):
    """Number of digest windows delivered by one flush."""

    delivered_count: int = Field(..., ge=0)
