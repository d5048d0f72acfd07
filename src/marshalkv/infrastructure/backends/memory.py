"""In-memory key-value backend implementation."""

import time
from collections.abc import Callable, Sequence
from datetime import timedelta

from cachetools import LRUCache  # type: ignore[import-untyped]

from marshalkv.core.interfaces.cache_backend import Key

# Stored payload and its monotonic expiry deadline (None = never)
_Entry = tuple[bytes, float | None]


class InMemoryCacheBackend:
    """In-memory backend using LRU eviction with per-key TTL.

    Suitable for single-process deployments and tests. Uses cachetools
    for LRU eviction; expiry deadlines are kept alongside each value so
    every key can carry its own TTL.

    Operations never await between reading and writing the cache, so
    set_if_absent is atomic with respect to other coroutines on the
    same event loop.
    """

    def __init__(
        self,
        maxsize: int = 1000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory backend.

        Args:
            maxsize: Maximum number of items kept before LRU eviction.
            timer: Clock returning seconds; injectable for tests.
        """
        self._maxsize = maxsize
        self._timer = timer
        self._cache: LRUCache[bytes, _Entry] = LRUCache(maxsize=maxsize)

    async def get(self, key: Key) -> bytes | None:
        """Retrieve stored bytes by key.

        Args:
            key: The key to retrieve.

        Returns:
            The stored bytes, or None if not found or expired.
        """
        return self._lookup(_normalize_key(key))

    async def set(
        self,
        key: Key,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> None:
        """Store bytes, overwriting any existing value.

        Args:
            key: The key.
            value: The bytes to store.
            ttl: Optional time-to-live. If None, the value does not expire.
        """
        self._cache[_normalize_key(key)] = (bytes(value), self._deadline(ttl))

    async def set_if_absent(
        self,
        key: Key,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> bool:
        """Store bytes only if the key holds no live value.

        Args:
            key: The key.
            value: The bytes to store.
            ttl: Optional time-to-live. If None, the value does not expire.

        Returns:
            True if the value was stored, False if the key already existed.
        """
        normalized = _normalize_key(key)
        if self._lookup(normalized) is not None:
            return False
        self._cache[normalized] = (bytes(value), self._deadline(ttl))
        return True

    async def mget(self, keys: Sequence[Key]) -> list[bytes | None]:
        """Retrieve several keys.

        Args:
            keys: Keys to retrieve.

        Returns:
            One entry per requested key, in request order; None for misses.
        """
        return [self._lookup(_normalize_key(key)) for key in keys]

    async def delete(self, *keys: Key) -> int:
        """Delete keys.

        Args:
            *keys: Keys to delete.

        Returns:
            Number of keys that existed and were deleted.
        """
        count = 0
        for key in keys:
            normalized = _normalize_key(key)
            if self._lookup(normalized) is not None:
                del self._cache[normalized]
                count += 1
        return count

    async def exists(self, key: Key) -> bool:
        """Check if key holds a live value.

        Args:
            key: The key to check.

        Returns:
            True if the key exists, False otherwise.
        """
        return self._lookup(_normalize_key(key)) is not None

    async def expire(self, key: Key, ttl: timedelta) -> bool:
        """Set a time-to-live on an existing key.

        Args:
            key: The key.
            ttl: Time-to-live from now.

        Returns:
            True if the key existed and the TTL was set.
        """
        normalized = _normalize_key(key)
        value = self._lookup(normalized)
        if value is None:
            return False
        self._cache[normalized] = (value, self._deadline(ttl))
        return True

    async def clear(self) -> None:
        """Clear all stored values."""
        self._cache.clear()

    def _lookup(self, key: bytes) -> bytes | None:
        """Return the live value for a normalized key, dropping it if expired."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        value, deadline = entry
        if deadline is not None and deadline <= self._timer():
            del self._cache[key]
            return None
        return value

    def _deadline(self, ttl: timedelta | None) -> float | None:
        if ttl is None:
            return None
        return self._timer() + ttl.total_seconds()

    def __len__(self) -> int:
        """Return the number of items held, including not yet purged expired ones."""
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize


def _normalize_key(key: Key) -> bytes:
    """Encode str keys as UTF-8 so str and bytes spellings match."""
    if isinstance(key, str):
        return key.encode("utf-8")
    return bytes(key)
