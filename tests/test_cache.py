# tests/test_cache.py

"""
Tests for caching functionality.
"""

from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest

from core.cache import (
    CacheKeys,
    cache_clear,
    cache_delete,
    cache_delete_pattern,
    cache_get,
    cache_set,
    get_cache,
    get_cached_data,
)


def test_cache_set_and_get():
    cache_set("test_key", "test_value", ttl_seconds=60)

    assert cache_get("test_key") == "test_value"


def test_cache_expiration():
    cache_set("expiring_key", "expired_value", ttl_seconds=60)
    assert cache_get("expiring_key") == "expired_value"

    # Push the entry into the past instead of sleeping
    get_cache()._cache["expiring_key"].expires_at = datetime.now() - timedelta(seconds=1)

    assert cache_get("expiring_key") is None
    assert get_cache().size() == 0


def test_cache_delete():
    cache_set("delete_key", "delete_value")
    cache_delete("delete_key")

    assert cache_get("delete_key") is None


def test_cache_delete_pattern():
    cache_set(CacheKeys.user_profile("a"), 1)
    cache_set(CacheKeys.user_profile("b"), 2)
    cache_set(CacheKeys.company_users("c"), 3)

    removed = cache_delete_pattern("user_profile_*")

    assert removed == 2
    assert cache_get(CacheKeys.company_users("c")) == 3


def test_cache_clear():
    cache_set("key1", "value1")
    cache_set("key2", "value2")

    cache_clear()

    assert cache_get("key1") is None
    assert cache_get("key2") is None


def test_get_cached_data_fetches_once():
    fetch = Mock(return_value={"id": "u-1"})

    assert get_cached_data("k", fetch) == {"id": "u-1"}
    assert get_cached_data("k", fetch) == {"id": "u-1"}
    fetch.assert_called_once()


def test_get_cached_data_does_not_cache_none():
    fetch = Mock(return_value=None)

    get_cached_data("k", fetch)
    get_cached_data("k", fetch)

    assert fetch.call_count == 2


def test_get_cached_data_reraises_fetch_errors():
    fetch = Mock(side_effect=RuntimeError("boom"))

    with pytest.raises(RuntimeError):
        get_cached_data("k", fetch)

    assert cache_get("k") is None
