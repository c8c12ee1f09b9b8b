"""Cache store interface for verification results."""

from typing import Optional, Protocol

from pydantic import BaseModel, Field

from ..models.verification import Verification


class CacheStats(BaseModel):
    """Counters describing cache usage."""

    key_count: int = Field(0, description="Live (unexpired) entries")
    hits: int = Field(0, description="Lookups that found an entry")
    misses: int = Field(0, description="Lookups that found nothing")


class CacheStore(Protocol):
    """Protocol for key-value stores holding verifications with a TTL.

    Implementations must be safe to share between concurrent callers.
    """

    def get(self, key: str) -> Optional[Verification]:
        """Return the cached verification or None when absent or expired."""
        ...

    def set(self, key: str, value: Verification, ttl: Optional[float] = None) -> None:
        """Store a verification, optionally overriding the default TTL."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...

    def stats(self) -> CacheStats:
        """Return usage counters."""
        ...
