"""
Health Check Utilities.

Standardized health responses aggregated from per-component async checks.
A failing provider marks the service degraded rather than down, since most
endpoints keep working when, for example, the hot cache is unreachable.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status for an individual component.

    Attributes:
        name: Component identifier.
        status: Current health status.
        message: Optional status message.
        latency_ms: Check latency in milliseconds.
    """

    name: str
    status: HealthStatus
    message: str | None = None
    latency_ms: float | None = None


class HealthResponse(BaseModel):
    """Standardized health check response."""

    status: HealthStatus
    service: str
    version: str = "1.0.0"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    components: list[ComponentHealth] = Field(default_factory=list)
    uptime_seconds: float = 0.0

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "healthy",
                "service": "quartz",
                "version": "1.0.0",
                "timestamp": "2025-01-20T12:00:00Z",
                "components": [
                    {"name": "openai", "status": "healthy", "message": "api_key=present"},
                    {"name": "cache", "status": "healthy", "latency_ms": 1.1},
                ],
                "uptime_seconds": 3600.0,
            }
        }
    }


CheckResult = bool | tuple[bool, str | None]
CheckFn = Callable[[], Awaitable[CheckResult]]


class HealthChecker:
    """Service health checker with component checks."""

    def __init__(self, service_name: str, version: str = "1.0.0"):
        self.service_name = service_name
        self.version = version
        self.start_time = datetime.now(UTC)
        self._checks: dict[str, CheckFn] = {}

    def register_check(self, name: str, check_fn: CheckFn) -> None:
        """Register a component health check.

        Args:
            name: Component name.
            check_fn: Async function returning ``bool`` or ``(bool, message)``.
        """
        self._checks[name] = check_fn

    async def _run_check(self, name: str, check_fn: CheckFn) -> ComponentHealth:
        start = time.perf_counter()
        try:
            result = await check_fn()
            if isinstance(result, tuple):
                is_healthy, message = result
            else:
                is_healthy, message = result, None
            status = HealthStatus.HEALTHY if is_healthy else HealthStatus.UNHEALTHY
        except Exception as e:
            status, message = HealthStatus.UNHEALTHY, str(e)

        return ComponentHealth(
            name=name,
            status=status,
            message=message,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
        )

    async def check_health(self) -> HealthResponse:
        """Perform all health checks concurrently."""
        components = await asyncio.gather(
            *(self._run_check(name, fn) for name, fn in self._checks.items())
        )

        if any(c.status == HealthStatus.UNHEALTHY for c in components):
            overall_status = HealthStatus.DEGRADED
        else:
            overall_status = HealthStatus.HEALTHY

        uptime = (datetime.now(UTC) - self.start_time).total_seconds()

        return HealthResponse(
            status=overall_status,
            service=self.service_name,
            version=self.version,
            components=list(components),
            uptime_seconds=round(uptime, 2),
        )
