"""In-memory TTL cache for verification results."""

import logging
import threading
import time
from typing import Callable, Optional, Tuple

from cachetools import TLRUCache

from ...domain.models.verification import Verification
from ...domain.ports.cache_store import CacheStats, CacheStore

logger = logging.getLogger(__name__)

DEFAULT_TTL = 3600.0
DEFAULT_MAXSIZE = 10000

_Entry = Tuple[Verification, float]


class MemoryCacheStore(CacheStore):
    """Process-local cache backed by ``cachetools.TLRUCache``.

    Each entry carries its own time-to-live so callers can override the
    default per ``set``. All operations hold a lock because cachetools
    caches are not thread-safe.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        maxsize: int = DEFAULT_MAXSIZE,
        timer: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            ttl: Default time-to-live in seconds
            maxsize: Maximum number of entries
            timer: Clock used for expiry
        """
        self._ttl = ttl
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=self._time_to_use, timer=timer)
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def _time_to_use(key: str, entry: _Entry, now: float) -> float:
        return now + entry[1]

    @property
    def ttl(self) -> float:
        """Get the default time-to-live in seconds."""
        return self._ttl

    def get(self, key: str) -> Optional[Verification]:
        """Return the cached verification or None when absent or expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry[0]

    def set(self, key: str, value: Verification, ttl: Optional[float] = None) -> None:
        """Store a verification, optionally overriding the default TTL."""
        with self._lock:
            self._cache[key] = (value, self._ttl if ttl is None else ttl)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._cache.clear()
        logger.info("🧹 Verification cache cleared")

    def stats(self) -> CacheStats:
        """Return usage counters."""
        with self._lock:
            self._cache.expire()
            return CacheStats(
                key_count=len(self._cache),
                hits=self._hits,
                misses=self._misses,
            )
