# core/cache.py

"""
Simple in-memory caching utilities.

Process-local, TTL based. Nothing here is shared between workers, so callers
that need cross-process freshness must keep the TTL short or skip the cache.
"""

import re
from typing import Optional, Any, Callable
from datetime import datetime, timedelta
from threading import Lock
from core.logging_config import logger


DEFAULT_TTL_SECONDS = 300


class CacheEntry:
    """Represents a cached value with expiration time."""

    def __init__(self, value: Any, ttl_seconds: int):
        self.value = value
        self.expires_at = datetime.now() + timedelta(seconds=ttl_seconds)

    def is_expired(self) -> bool:
        """Check if the cache entry has expired."""
        return datetime.now() >= self.expires_at


class SimpleCache:
    """
    Simple in-memory cache with TTL support.

    Thread-safe for concurrent access.
    """

    def __init__(self):
        self._cache: dict[str, CacheEntry] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """
        Get a value from the cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or expired
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if entry.is_expired():
                del self._cache[key]
                return None

            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        """
        Set a value in the cache with TTL.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: Time to live in seconds (default: 5 minutes)
        """
        with self._lock:
            self._cache[key] = CacheEntry(value, ttl_seconds)

    def delete(self, key: str):
        with self._lock:
            self._cache.pop(key, None)

    def delete_pattern(self, pattern: str) -> int:
        """
        Delete every key matching a glob-style pattern ("*" matches anything).

        Returns:
            Number of entries removed
        """
        regex = re.compile(".*".join(re.escape(part) for part in pattern.split("*")))
        with self._lock:
            matched = [key for key in self._cache if regex.search(key)]
            for key in matched:
                del self._cache[key]
        return len(matched)

    def clear(self):
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        """Get the number of entries in the cache."""
        with self._lock:
            return len(self._cache)


# Global cache instance
_cache = SimpleCache()


def get_cache() -> SimpleCache:
    """Get the global cache instance."""
    return _cache


# -----------------------------------------------------
# Cache key builders
# -----------------------------------------------------
class CacheKeys:
    COMPANY_USERS_PREFIX = "company_users_"
    USER_PROFILE_PREFIX = "user_profile_"

    @staticmethod
    def user_profile(user_id: str) -> str:
        return f"{CacheKeys.USER_PROFILE_PREFIX}{user_id}"

    @staticmethod
    def company_users(company_id: str) -> str:
        return f"{CacheKeys.COMPANY_USERS_PREFIX}{company_id}"


def get_cached_data(key: str, fetch_function: Callable[[], Any], ttl_seconds: int = DEFAULT_TTL_SECONDS) -> Any:
    """
    Return the cached value for `key`, or call `fetch_function`, cache its
    result and return it.

    Exceptions from `fetch_function` are logged and re-raised; nothing is
    cached on failure. A None result is returned but not cached.
    """
    cached_value = _cache.get(key)
    if cached_value is not None:
        logger.debug(f"Cache hit: {key}")
        return cached_value

    try:
        data = fetch_function()
    except Exception as e:
        logger.error(f"Error fetching data for key {key}: {e}")
        raise

    if data is not None:
        _cache.set(key, data, ttl_seconds)
        logger.debug(f"Cache miss, stored: {key}")

    return data


def cache_get(key: str) -> Optional[Any]:
    return _cache.get(key)


def cache_set(key: str, value: Any, ttl_seconds: int = DEFAULT_TTL_SECONDS):
    _cache.set(key, value, ttl_seconds)


def cache_delete(key: str):
    _cache.delete(key)


def cache_delete_pattern(pattern: str) -> int:
    """
    Delete all cache entries whose key matches `pattern`.

    Example:
        cache_delete_pattern("user_profile_*")
    """
    return _cache.delete_pattern(pattern)


def cache_clear():
    """Clear all cache entries."""
    _cache.clear()
