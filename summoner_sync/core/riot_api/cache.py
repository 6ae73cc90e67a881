"""
Caching layer for Riot API responses using TTL-based in-memory cache.

One ``TTLCache`` is constructed at startup and handed to the client; nothing
here is created at import time.
"""

import time
import threading
from typing import Any, Callable, Optional, Dict, Tuple
import structlog

logger = structlog.get_logger(__name__)


class TTLCache:
    """Simple TTL cache with thread-safe operations."""

    def __init__(
        self,
        maxsize: int = 1000,
        ttl: float = 120,
        timer: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize TTL cache.

        Args:
            maxsize: Maximum number of entries
            ttl: Time to live in seconds; 0 disables caching
            timer: Clock used for expiry
        """
        self.maxsize = maxsize
        self.ttl = ttl
        self.timer = timer
        self.cache: Dict[str, Tuple[Any, float]] = {}
        self.lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @property
    def enabled(self) -> bool:
        return self.ttl > 0

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache if not expired.

        Args:
            key: Cache key

        Returns:
            Cached value if exists and not expired, None otherwise
        """
        with self.lock:
            if key in self.cache:
                value, expiry = self.cache[key]
                if self.timer() < expiry:
                    self._hits += 1
                    logger.debug("Cache hit", key=key, hits=self._hits)
                    return value
                del self.cache[key]
                logger.debug("Cache expired", key=key)
            self._misses += 1
            return None

    def set(self, key: str, value: Any) -> None:
        """
        Set value in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
        """
        if not self.enabled:
            return
        with self.lock:
            # Simple FIFO eviction: if cache is full, remove oldest entry
            if len(self.cache) >= self.maxsize and key not in self.cache:
                oldest_key = next(iter(self.cache))
                del self.cache[oldest_key]
                logger.debug("Cache eviction", key=oldest_key, reason="full")

            self.cache[key] = (value, self.timer() + self.ttl)

    def clear(self) -> None:
        """Clear all entries from cache."""
        with self.lock:
            count = len(self.cache)
            self.cache.clear()
            self._hits = 0
            self._misses = 0
            logger.info("Cache cleared", entries_removed=count)

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self.lock:
            total = self._hits + self._misses
            return {
                "size": len(self.cache),
                "maxsize": self.maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }

    def __len__(self) -> int:
        """Get number of entries in cache."""
        return len(self.cache)
