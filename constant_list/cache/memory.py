"""
In-memory cache backend with lazy, read-time expiration.
"""
import logging
import pickle
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from .base import CacheBackend
from .core import DEFAULT_TTL, TTL, CacheEntry, expiration_time, utcnow, validate_key

logger = logging.getLogger("cache.memory")


class MemoryCache(CacheBackend):
    """
    Process-local cache.

    - Values are pickled on write and unpickled on read, so callers never
      share state with the store
    - Expired entries are ignored by get() but stay in place until
      overwritten, deleted or cleared; there is no background sweep
    - Each operation holds the lock for its own duration only
    """

    def __init__(
        self,
        default_ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize the cache.

        Args:
            default_ttl: TTL applied when set() is called without one
            clock: Returns the current time; injectable for tests
        """
        self._items: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._default_ttl = default_ttl
        self._clock = clock

        self._stats = {
            "hits": 0,
            "misses": 0,
            "expired": 0,
        }

    def get(self, key: str, default: Any = None) -> Any:
        validate_key(key)

        with self._lock:
            entry = self._items.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return default

            if not entry.is_fresh(self._clock()):
                logger.debug(f"Expired entry ignored: {key}")
                self._stats["expired"] += 1
                return default

            self._stats["hits"] += 1
            payload = entry.payload

        return pickle.loads(payload)

    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        validate_key(key)

        expires_at = expiration_time(self._clock(), ttl, self._default_ttl)

        try:
            payload = pickle.dumps(value)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            logger.warning(f"Cannot cache value for {key}: {e}")
            return False

        with self._lock:
            self._items[key] = CacheEntry(payload=payload, expires_at=expires_at)
        return True

    def delete(self, key: str) -> bool:
        validate_key(key)

        with self._lock:
            self._items.pop(key, None)
        return True

    def has(self, key: str) -> bool:
        validate_key(key)

        with self._lock:
            return key in self._items

    def clear(self) -> bool:
        with self._lock:
            count = len(self._items)
            self._items.clear()
        logger.info(f"Cleared {count} cache entries")
        return True

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            reads = self._stats["hits"] + self._stats["misses"] + self._stats["expired"]
            hit_rate = (self._stats["hits"] / reads * 100) if reads > 0 else 0

            return {
                "entries": len(self._items),
                "hits": self._stats["hits"],
                "misses": self._stats["misses"],
                "expired": self._stats["expired"],
                "hit_rate_percent": round(hit_rate, 1),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def memory_cache_from_seconds(
    ttl_seconds: Optional[int] = None,
    clock: Callable[[], datetime] = utcnow,
) -> MemoryCache:
    """Build a MemoryCache whose default TTL is given in seconds."""
    default_ttl = timedelta(seconds=ttl_seconds) if ttl_seconds is not None else DEFAULT_TTL
    return MemoryCache(default_ttl=default_ttl, clock=clock)
