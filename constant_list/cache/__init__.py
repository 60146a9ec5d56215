"""
TTL key/value cache used to memoize constant list scans.
"""
from .core import (
    CacheEntry,
    DEFAULT_TTL,
    KEY_PATTERN,
    expiration_time,
    ttl_to_timedelta,
    validate_key,
)
from .base import CacheBackend
from .memory import MemoryCache, memory_cache_from_seconds

__all__ = [
    # Core types
    "CacheEntry",
    "DEFAULT_TTL",
    "KEY_PATTERN",
    "expiration_time",
    "ttl_to_timedelta",
    "validate_key",
    # Backends
    "CacheBackend",
    "MemoryCache",
    "memory_cache_from_seconds",
]
