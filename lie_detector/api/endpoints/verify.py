"""Claim verification endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...domain.models.claim import Claim
from ...domain.models.verification import Verification
from ...domain.services.batch_scheduler import BatchScheduler
from ...infrastructure.dependencies import ServiceContainer, get_batch_scheduler, get_service_container

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["verify"])


class VerifyRequest(BaseModel):
    """Request model for claim verification."""

    claims: List[Claim] = Field(..., description="Claims to verify, in display order")
    url: Optional[str] = Field(None, description="Page the claims were extracted from")


class VerifyMeta(BaseModel):
    """Counters describing a verify response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    from_cache: int


class VerifyResponse(BaseModel):
    """Response model for claim verification."""

    verifications: List[Verification] = Field(..., description="Results, index-aligned with the request")
    cached: bool = Field(..., description="Whether every result came from the cache")
    meta: VerifyMeta


@router.post("/verify", response_model=VerifyResponse)
async def verify_claims(
    request: VerifyRequest,
    container: ServiceContainer = Depends(get_service_container),
    scheduler: BatchScheduler = Depends(get_batch_scheduler),
) -> VerifyResponse:
    """Verify a batch of claims.

    Args:
        request: Claims to verify

    Returns:
        One verification per claim

    Raises:
        HTTPException: If the batch is empty or too large
    """
    if not request.claims:
        raise HTTPException(status_code=400, detail="Claims array is required")

    max_batch_size = container.settings.max_batch_size
    if len(request.claims) > max_batch_size:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {max_batch_size} claims per request",
        )

    logger.info(f"📥 Verifying {len(request.claims)} claims from {request.url or 'unknown page'}")

    outcome = await scheduler.verify_batch(request.claims)

    return VerifyResponse(
        verifications=outcome.verifications,
        cached=outcome.cached_count == len(request.claims),
        meta=VerifyMeta(total=len(request.claims), from_cache=outcome.cached_count),
    )
