"""Health check service with cached dependency probes."""

import logging
import time

from django.core.cache import cache
from django.db import connection
from django.db.utils import OperationalError

from notifications.enums import HealthStatus
from notifications.schemas.health import (
    DependencyHealth,
    LivenessResponse,
    ReadinessResponse,
)
from notifications.services.realtime_client import RealtimeClient

logger = logging.getLogger(__name__)


class HealthService:
    """Service for performing health checks with caching."""

    def __init__(self, cache_ttl_seconds: float = 5.0) -> None:
        """Initialize the health service.

        Args:
            cache_ttl_seconds: Time to live for cached health check results
        """
        self.cache_ttl_seconds = cache_ttl_seconds
        self._cached: dict[str, tuple[float, DependencyHealth]] = {}

    def get_liveness_status(self) -> LivenessResponse:
        return LivenessResponse(status="alive")

    def get_readiness_status(self) -> ReadinessResponse:
        """Get readiness status with database, cache and realtime checks.

        Returns degraded (ready=True, degraded=True) when a dependency is
        down so the service stays deployable; the in-app feed keeps working
        without email digests or realtime push.

        Returns:
            ReadinessResponse with overall status and dependency health
        """
        dependencies = {
            "database": self._cached_check("database", self.check_database_health),
            "redis": self._cached_check("redis", self.check_redis_health),
            "realtime": self.check_realtime_configuration(),
        }
        degraded = any(
            not dep.healthy and dep.status != HealthStatus.NOT_CONFIGURED
            for dep in dependencies.values()
        )
        return ReadinessResponse(
            ready=True,
            status="degraded" if degraded else "ready",
            degraded=degraded,
            dependencies=dependencies,
        )

    def _cached_check(self, name: str, check) -> DependencyHealth:
        now = time.time()
        cached = self._cached.get(name)
        if cached is not None and (now - cached[0]) < self.cache_ttl_seconds:
            return cached[1]
        health = check()
        self._cached[name] = (now, health)
        return health

    def check_database_health(self) -> DependencyHealth:
        """Check database connectivity without executing a query."""
        start_time = time.perf_counter()
        try:
            connection.ensure_connection()
        except OperationalError as e:
            logger.warning("Database health check failed: %s", e)
            return DependencyHealth(
                healthy=False,
                status=HealthStatus.UNHEALTHY,
                message=f"Database connection failed: {e!s}",
                response_time_ms=(time.perf_counter() - start_time) * 1000,
            )
        except Exception as e:
            logger.error("Unexpected error checking database: %s", e)
            return DependencyHealth(
                healthy=False,
                status=HealthStatus.ERROR,
                message=f"Unexpected error checking database: {e!s}",
                response_time_ms=(time.perf_counter() - start_time) * 1000,
            )

        return DependencyHealth(
            healthy=True,
            status=HealthStatus.HEALTHY,
            message="Database connection successful",
            response_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    def check_redis_health(self) -> DependencyHealth:
        """Check the cache backend (Redis in production) with a round trip."""
        start_time = time.perf_counter()
        try:
            cache.set("__health_check__", "ok", timeout=1)
            healthy = cache.get("__health_check__") == "ok"
        except Exception as e:
            logger.warning("Redis health check failed: %s", e)
            return DependencyHealth(
                healthy=False,
                status=HealthStatus.ERROR,
                message=f"Redis connection failed: {e!s}",
                response_time_ms=(time.perf_counter() - start_time) * 1000,
            )

        return DependencyHealth(
            healthy=healthy,
            status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
            message=(
                "Redis connection successful"
                if healthy
                else "Redis health check failed: unexpected result"
            ),
            response_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    def check_realtime_configuration(self) -> DependencyHealth:
        if RealtimeClient().is_configured:
            return DependencyHealth(
                healthy=True,
                status=HealthStatus.HEALTHY,
                message="Realtime publish endpoint configured",
            )
        return DependencyHealth(
            healthy=False,
            status=HealthStatus.NOT_CONFIGURED,
            message="Realtime push disabled; clients fall back to polling",
        )


# Global health service instance
health_service = HealthService()
