"""Health check endpoints."""

from datetime import datetime
from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...domain.ports.cache_store import CacheStats
from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    cache: CacheStats
    services: Dict[str, bool]
    sources: Dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> HealthResponse:
    """Check the health of all service components.

    Returns:
        Cache counters and which optional services are configured
    """
    settings = container.settings
    return HealthResponse(
        status="ok",
        timestamp=datetime.utcnow(),
        cache=container.get_cache().stats(),
        services={
            "google_fact_check": settings.has_google_credentials,
            "llm": settings.has_llm_credentials,
        },
        sources=container.active_sources,
    )
