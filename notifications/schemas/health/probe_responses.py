"""Response bodies of the liveness and readiness probes."""

from pydantic import Field

from notifications.enums import HealthStatus
from notifications.schemas.base_schema_model import BaseSchemaModel


class DependencyHealth(BaseSchemaModel):
    """Result of probing one dependency (database, redis, realtime)."""

    healthy: bool
    status: HealthStatus
    message: str
    response_time_ms: float | None = Field(
        None, description="Probe duration; absent for configuration-only checks"
    )


class LivenessResponse(BaseSchemaModel):
    status: str = Field("alive", description="Reported while the process serves")


class ReadinessResponse(BaseSchemaModel):
    """Readiness of the engine.

    ``ready`` stays true while dependencies are down: the feed keeps being
    written and read, only email and realtime delivery degrade.
    """

    ready: bool
    status: str = Field(..., description="'ready' or 'degraded'")
    degraded: bool
    dependencies: dict[str, DependencyHealth]
