"""Health check endpoint handlers."""

import asyncio
import logging
import time
from datetime import datetime, timezone

import httpx
from fastapi import APIRouter, Response

from scribe import __version__
from scribe.api.deps import CapabilityDep, SettingsDep
from scribe.config import Settings
from scribe.core.capability import GenerationCapability
from scribe.models.health import ComponentHealth, HealthResponse, HealthStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Thresholds for health status determination
LATENCY_DEGRADED_MS = 2000
HEALTH_CHECK_TIMEOUT_SECONDS = 5


def check_capability(capability: GenerationCapability) -> ComponentHealth:
    """Health of the generation capability as reported by its probe."""
    status = capability.probe()
    if status.available:
        return ComponentHealth(status=HealthStatus.HEALTHY, message=status.provider)
    return ComponentHealth(status=HealthStatus.UNHEALTHY, error=status.reason)


async def check_provider_health(settings: Settings) -> ComponentHealth:
    """Check connectivity to the OpenAI-compatible API.

    Args:
        settings: Application settings.

    Returns:
        ComponentHealth indicating provider status.
    """
    if not settings.health.provider_check_enabled:
        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            message="Check disabled",
        )

    if not settings.openai.api_key:
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            error="OpenAI API key not configured",
        )

    try:
        start_time = time.perf_counter()

        async with httpx.AsyncClient(timeout=settings.health.timeout_seconds) as client:
            # The models listing is the cheapest authenticated call
            response = await client.get(
                f"{settings.openai.base_url}/models",
                headers={"Authorization": f"Bearer {settings.openai.api_key}"},
            )

        latency_ms = int((time.perf_counter() - start_time) * 1000)

        if response.status_code == 200:
            if latency_ms > LATENCY_DEGRADED_MS:
                return ComponentHealth(
                    status=HealthStatus.DEGRADED,
                    latency_ms=latency_ms,
                    message="High latency detected",
                )
            return ComponentHealth(
                status=HealthStatus.HEALTHY,
                latency_ms=latency_ms,
            )
        elif response.status_code == 401:
            return ComponentHealth(
                status=HealthStatus.UNHEALTHY,
                error="Invalid API key",
            )
        else:
            return ComponentHealth(
                status=HealthStatus.UNHEALTHY,
                error=f"Unexpected status code: {response.status_code}",
            )

    except httpx.TimeoutException:
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            error="Connection timeout",
        )
    except httpx.ConnectError as e:
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            error=f"Connection failed: {str(e)}",
        )
    except Exception as e:
        logger.exception("Unexpected error during provider health check")
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            error=f"Unexpected error: {type(e).__name__}",
        )


def determine_overall_status(checks: dict[str, ComponentHealth]) -> HealthStatus:
    """Determine overall health status from component checks."""
    if not checks:
        return HealthStatus.HEALTHY

    statuses = [check.status for check in checks.values()]

    if any(s == HealthStatus.UNHEALTHY for s in statuses):
        return HealthStatus.UNHEALTHY
    elif any(s == HealthStatus.DEGRADED for s in statuses):
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: SettingsDep, capability: CapabilityDep, response: Response
) -> HealthResponse:
    """Service health including the generation capability.

    - HTTP 200: healthy or degraded
    - HTTP 503: unhealthy
    """
    checks = {"capability": check_capability(capability)}

    if checks["capability"].status == HealthStatus.HEALTHY and capability.name == "openai":
        try:
            checks["provider"] = await asyncio.wait_for(
                check_provider_health(settings),
                timeout=HEALTH_CHECK_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            checks["provider"] = ComponentHealth(
                status=HealthStatus.UNHEALTHY,
                error="Health check timeout",
            )

    overall_status = determine_overall_status(checks)

    if overall_status == HealthStatus.UNHEALTHY:
        response.status_code = 503

    return HealthResponse(
        status=overall_status,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness probe; no dependencies are checked."""
    return {"status": "alive"}


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(
    settings: SettingsDep, capability: CapabilityDep, response: Response
) -> HealthResponse:
    """Readiness probe, same checks as /health."""
    return await health_check(settings, capability, response)
