"""Verification cache endpoints."""

from typing import Dict

from fastapi import APIRouter, Depends

from ...domain.ports.cache_store import CacheStats
from ...infrastructure.cache.memory_cache import MemoryCacheStore
from ...infrastructure.dependencies import get_cache

router = APIRouter(prefix="/api/cache", tags=["cache"])


@router.get("/stats", response_model=CacheStats)
async def cache_stats(cache: MemoryCacheStore = Depends(get_cache)) -> CacheStats:
    """Get cache usage counters."""
    return cache.stats()


@router.post("/clear")
async def clear_cache(cache: MemoryCacheStore = Depends(get_cache)) -> Dict[str, str]:
    """Drop every cached verification."""
    cache.clear()
    return {"message": "Cache cleared"}
