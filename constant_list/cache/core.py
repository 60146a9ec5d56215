"""
Core cache data structures and key/TTL rules.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from ..exceptions import InvalidKeyError

KEY_PATTERN = re.compile(r"[A-Za-z0-9_.]{1,64}")

DEFAULT_TTL = timedelta(hours=1)

TTL = Union[int, timedelta, None]


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def validate_key(key: object) -> str:
    """
    Check a key against the cache key format.

    Raises:
        InvalidKeyError: If key is not 1-64 characters of [A-Za-z0-9_.]
    """
    if not isinstance(key, str) or not KEY_PATTERN.fullmatch(key):
        raise InvalidKeyError(f"The provided key is not valid: {key!r}")
    return key


def ttl_to_timedelta(ttl: TTL, default: timedelta = DEFAULT_TTL) -> timedelta:
    """
    Normalize a TTL argument.

    Args:
        ttl: Seconds as int, a timedelta, or None for the default
        default: Duration used when ttl is None

    Returns:
        The TTL as a timedelta
    """
    if isinstance(ttl, timedelta):
        return ttl
    if isinstance(ttl, int) and not isinstance(ttl, bool):
        return timedelta(seconds=ttl)
    return default


def _is_negative(ttl: TTL) -> bool:
    if isinstance(ttl, timedelta):
        return ttl < timedelta(0)
    return isinstance(ttl, int) and not isinstance(ttl, bool) and ttl < 0


def expiration_time(now: datetime, ttl: TTL, default: timedelta = DEFAULT_TTL) -> datetime:
    """
    Compute ``now + ttl``.

    TTLs beyond the datetime range are clamped to ``datetime.max`` (or
    ``datetime.min`` for negative TTLs) in the clock's timezone.
    """
    try:
        return now + ttl_to_timedelta(ttl, default)
    except (OverflowError, ValueError):
        limit = datetime.min if _is_negative(ttl) else datetime.max
        return limit.replace(tzinfo=now.tzinfo)


@dataclass
class CacheEntry:
    """
    A stored value with its expiration time.

    ``payload`` holds the serialized value so readers always get a copy.
    """
    payload: bytes
    expires_at: datetime

    def is_fresh(self, now: Optional[datetime] = None) -> bool:
        """Check if the entry is still within its TTL."""
        return (now or utcnow()) < self.expires_at
