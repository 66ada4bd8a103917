"""Health probe schemas."""

from notifications.schemas.health.probe_responses import (
    DependencyHealth,
    LivenessResponse,
    ReadinessResponse,
)

__all__ = ["DependencyHealth", "LivenessResponse", "ReadinessResponse"]
