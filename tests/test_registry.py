"""
Tests for ConstantLists: lookups, memoization, debug mode and settings.
"""
import hashlib
from datetime import datetime, timedelta, timezone

import pytest

from config.settings import Settings
from constant_list import registry
from constant_list.cache import MemoryCache
from constant_list.exceptions import AnnotationError, SourceUnavailableError
from constant_list.registry import ConstantLists, cache_key_for

from class_with_constants import (
    ClassWithAnnotatedOnlyConstant,
    ClassWithBadConstantAnnotation,
    ClassWithConstants,
)


# =============================================================================
# Fixtures
# =============================================================================

class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 8, 17, 15, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryCache(clock=clock)


@pytest.fixture
def constant_lists(cache):
    return ConstantLists(cache=cache, settings=Settings(debug=False, cache_ttl_seconds=60))


@pytest.fixture
def scan_counter(monkeypatch):
    """Count how many times class sources are scanned."""
    calls = []
    original = registry.parse_class

    def counting_parse(cls):
        calls.append(cls)
        return original(cls)

    monkeypatch.setattr(registry, "parse_class", counting_parse)
    return calls


# =============================================================================
# Lookups
# =============================================================================

def test_get_returns_all_lists(constant_lists):
    constants = constant_lists.get(ClassWithConstants)

    assert isinstance(constants, dict)
    assert len(constants) == 2
    assert set(constants) == {"type", "format"}


def test_get_list(constant_lists):
    assert len(constant_lists.get_list(ClassWithConstants, "type")) == 3
    assert constant_lists.get_list(ClassWithConstants, "unknown") == {}


def test_get_label(constant_lists):
    assert constant_lists.get_label(
        ClassWithConstants, "format", ClassWithConstants.FORMAT_PDF
    ) == "Format PDF in multi line format"
    assert constant_lists.get_label(ClassWithConstants, "format", "unknown") is None
    assert constant_lists.get_label(ClassWithConstants, "unknown", "PDF") is None


def test_exists(constant_lists):
    assert constant_lists.exists(ClassWithConstants, "format", ClassWithConstants.FORMAT_PDF)
    assert not constant_lists.exists(ClassWithConstants, "format", "unknown-constant")
    assert not constant_lists.exists(ClassWithConstants, "type", ClassWithConstants.UNLISTED)


def test_bad_annotation_raises(constant_lists):
    with pytest.raises(AnnotationError):
        constant_lists.get(ClassWithBadConstantAnnotation)

    with pytest.raises(AnnotationError):
        constant_lists.get_list(ClassWithBadConstantAnnotation, "without-label")


def test_annotation_only_constant_is_skipped(constant_lists):
    constants = constant_lists.get(ClassWithAnnotatedOnlyConstant)
    assert constants == {"kinds": {"default": "Bound kind"}}


def test_builtin_class_raises(constant_lists):
    with pytest.raises(SourceUnavailableError):
        constant_lists.get(int)


# =============================================================================
# Caching
# =============================================================================

def test_cache_key_is_md5_of_qualified_name():
    expected = hashlib.md5(b"class_with_constants.ClassWithConstants").hexdigest()
    assert cache_key_for(ClassWithConstants) == expected


def test_scan_result_is_cached(constant_lists, cache, scan_counter):
    first = constant_lists.get(ClassWithConstants)
    second = constant_lists.get(ClassWithConstants)

    assert first == second
    assert len(scan_counter) == 1
    assert cache.has(cache_key_for(ClassWithConstants))


def test_returned_lists_do_not_alias_cache(constant_lists):
    constant_lists.get(ClassWithConstants)["format"]["PDF"] = "changed"

    assert constant_lists.get_label(ClassWithConstants, "format", "PDF") == (
        "Format PDF in multi line format"
    )


def test_expired_scan_is_refreshed(constant_lists, clock, scan_counter):
    constant_lists.get(ClassWithConstants)
    clock.advance(59)
    constant_lists.get(ClassWithConstants)
    assert len(scan_counter) == 1

    clock.advance(1)
    assert len(constant_lists.get(ClassWithConstants)) == 2
    assert len(scan_counter) == 2


def test_clear_cache(constant_lists, cache, scan_counter):
    constant_lists.get(ClassWithConstants)

    assert constant_lists.clear_cache() is True
    assert len(cache) == 0

    constant_lists.get(ClassWithConstants)
    assert len(scan_counter) == 2


def test_set_cache_replaces_backend(constant_lists, clock):
    replacement = MemoryCache(clock=clock)
    constant_lists.set_cache(replacement)
    constant_lists.get(ClassWithConstants)

    assert constant_lists.cache is replacement
    assert replacement.has(cache_key_for(ClassWithConstants))


def test_default_cache_is_created_lazily():
    constant_lists = ConstantLists(settings=Settings(debug=False, cache_ttl_seconds=120))

    assert isinstance(constant_lists.cache, MemoryCache)
    assert constant_lists.cache is constant_lists.cache


# =============================================================================
# Debug mode and settings
# =============================================================================

def test_debug_mode_bypasses_cache(cache, scan_counter):
    constant_lists = ConstantLists(cache=cache, settings=Settings(debug=True))

    constant_lists.get(ClassWithConstants)
    constant_lists.get(ClassWithConstants)

    assert len(cache) == 0
    assert len(scan_counter) == 2


def test_debug_can_be_toggled(constant_lists, cache):
    constant_lists.clear_cache()

    constant_lists.debug = True
    constant_lists.get(ClassWithConstants)
    assert not cache.has(cache_key_for(ClassWithConstants))

    constant_lists.debug = False
    constant_lists.get(ClassWithConstants)
    assert cache.has(cache_key_for(ClassWithConstants))


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("CONSTANT_LIST_DEBUG", "1")
    monkeypatch.setenv("CONSTANT_LIST_CACHE_TTL_SECONDS", "30")

    settings = Settings()
    assert settings.debug is True
    assert settings.cache_ttl_seconds == 30
    assert ConstantLists(settings=settings).debug is True


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("CONSTANT_LIST_DEBUG", raising=False)
    monkeypatch.delenv("CONSTANT_LIST_CACHE_TTL_SECONDS", raising=False)

    settings = Settings(_env_file=None)
    assert settings.debug is False
    assert settings.cache_ttl_seconds == 3600
