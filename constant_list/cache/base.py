"""Cache backend abstraction.

Any store used to memoize scans implements the single-key operations below;
the batch operations are shared and built on top of them.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Dict, List, Tuple

from ..exceptions import InvalidKeyError
from .core import TTL


def _require_iterable(obj: Any, operation: str) -> None:
    # A bare string is a single key, not a collection of keys
    if isinstance(obj, (str, bytes)) or not isinstance(obj, Iterable):
        raise InvalidKeyError(
            f"Argument passed to {operation} must be iterable, got {type(obj).__name__}"
        )


class CacheBackend(ABC):
    """
    Abstract key/value cache with per-entry expiration.

    Keys must match ``[A-Za-z0-9_.]{1,64}``; every single-key operation
    raises InvalidKeyError otherwise.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Fetch a value.

        Returns:
            The stored value if present and not expired, else default
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        """
        Store a value, replacing any existing entry.

        Args:
            key: Cache key
            value: Value to store
            ttl: Seconds, a timedelta, or None for the backend default

        Returns:
            False if the value cannot be stored by this backend
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove an entry. Missing keys are not an error."""
        pass

    @abstractmethod
    def has(self, key: str) -> bool:
        """Check whether an entry exists, regardless of expiration."""
        pass

    @abstractmethod
    def clear(self) -> bool:
        """Remove all entries."""
        pass

    def get_multiple(self, keys: Iterable, default: Any = None) -> Dict[str, Any]:
        """
        Fetch several values.

        Returns:
            Dict of key -> value (or default), in request order

        Raises:
            InvalidKeyError: If keys is not iterable or holds an invalid key
        """
        _require_iterable(keys, "get_multiple")
        return {key: self.get(key, default) for key in keys}

    def set_multiple(self, values: Any, ttl: TTL = None) -> bool:
        """
        Store several values with the same TTL.

        Always returns True, even when an individual set reports failure.

        Raises:
            InvalidKeyError: If values is not a mapping or iterable of pairs
        """
        _require_iterable(values, "set_multiple")
        pairs: List[Tuple[str, Any]]
        if isinstance(values, Mapping):
            pairs = list(values.items())
        else:
            pairs = []
            for item in values:
                if not isinstance(item, (tuple, list)) or len(item) != 2:
                    raise InvalidKeyError(
                        f"Values passed to set_multiple must be key/value pairs, got {item!r}"
                    )
                pairs.append((item[0], item[1]))

        for key, value in pairs:
            self.set(key, value, ttl)
        return True

    def delete_multiple(self, keys: Iterable) -> bool:
        """
        Remove several entries, stopping at the first failed delete.

        Returns:
            False as soon as one delete fails, else True
        """
        _require_iterable(keys, "delete_multiple")
        for key in keys:
            if not self.delete(key):
                return False
        return True
