"""Health check endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Request

from pagehub import __version__
from pagehub.api.schemas import HealthResponse, ReadyResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    operation_id="getHealth",
    summary="Health check",
    description="Check the health status of the API and its adapters.",
)
async def health_check(request: Request) -> HealthResponse:
    """Report which adapter groups are configured."""
    services: dict[str, Literal["up", "down", "unknown"]] = {}
    overall_status: Literal["healthy", "degraded", "unhealthy"] = "healthy"

    registry_index = getattr(request.app.state, "registry_index", None)
    services["registry"] = "up" if registry_index is not None else "down"
    if registry_index is None:
        overall_status = "unhealthy"

    adapters = getattr(request.app.state, "adapter_registry", None)
    if adapters is None:
        services["trackers"] = "down"
        services["authors"] = "unknown"
        overall_status = "unhealthy"
    else:
        services["trackers"] = "up" if adapters.factory.registered_types else "down"
        services["authors"] = "up" if adapters.author_directories else "unknown"
        if services["trackers"] == "down" and overall_status == "healthy":
            overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        services=services,
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    operation_id="getReady",
    summary="Readiness check",
    description="Check if the API is ready to serve traffic.",
)
async def readiness_check(request: Request) -> ReadyResponse:
    registry_index = getattr(request.app.state, "registry_index", None)
    adapters = getattr(request.app.state, "adapter_registry", None)
    return ReadyResponse(ready=registry_index is not None and adapters is not None)
