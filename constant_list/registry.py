"""
Constant list lookups with per-class memoization.
"""
import hashlib
import logging
from typing import Any, Dict, Optional

from config.settings import Settings

from .cache import CacheBackend, memory_cache_from_seconds
from .scanner import ConstantListMap, scan
from .source import resolver_for, tokenize_class, type_identifier

logger = logging.getLogger("constant_list.registry")

_MISSING = object()


def cache_key_for(cls: type) -> str:
    """Cache key for a class: md5 hex digest of its qualified name."""
    return hashlib.md5(type_identifier(cls).encode("utf-8")).hexdigest()


def parse_class(cls: type) -> ConstantListMap:
    """Scan a class source for annotated constants."""
    return scan(tokenize_class(cls), resolve=resolver_for(cls))


class ConstantLists:
    """
    Entry point for reading constant lists declared on classes.

    Usage:
        constant_lists = ConstantLists()
        constant_lists.get_label(Document, "format", Document.FORMAT_PDF)
    """

    def __init__(
        self,
        cache: Optional[CacheBackend] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            cache: Backend used to memoize scans. A MemoryCache is created on
                first use when omitted.
            settings: Debug flag and default TTL; read from the environment
                when omitted
        """
        self._settings = settings or Settings()
        self._cache = cache
        self.debug = self._settings.debug

    @property
    def cache(self) -> CacheBackend:
        """The active cache backend."""
        if self._cache is None:
            self._cache = memory_cache_from_seconds(self._settings.cache_ttl_seconds)
        return self._cache

    def set_cache(self, cache: CacheBackend) -> None:
        """Replace the cache backend."""
        self._cache = cache

    def clear_cache(self) -> bool:
        """Drop every memoized scan."""
        return self.cache.clear()

    def get(self, cls: type) -> ConstantListMap:
        """
        Get all constant lists declared on a class.

        Returns:
            Mapping of list name to {constant value: label}

        Raises:
            AnnotationError: If a tagged constant has no label
            SourceUnavailableError: If the class source cannot be read
        """
        if self.debug:
            return parse_class(cls)

        key = cache_key_for(cls)
        constant_lists = self.cache.get(key, _MISSING)
        if constant_lists is not _MISSING:
            logger.debug(f"CACHE HIT: {type_identifier(cls)}")
            return constant_lists

        logger.info(f"CACHE MISS: {type_identifier(cls)}, scanning source")
        constant_lists = parse_class(cls)
        self.cache.set(key, constant_lists, self._settings.cache_ttl_seconds)
        return constant_lists

    def get_list(self, cls: type, list_name: str) -> Dict[Any, str]:
        """Get one constant list, or an empty dict if it is not declared."""
        return self.get(cls).get(list_name, {})

    def get_label(self, cls: type, list_name: str, value: Any) -> Optional[str]:
        """Get the label for a constant value, or None."""
        return self.get_list(cls, list_name).get(value)

    def exists(self, cls: type, list_name: str, value: Any) -> bool:
        """Check whether a constant value has a label in the given list."""
        return bool(self.get_label(cls, list_name, value))
