"""Redis key-value backend implementation."""

import logging
import re
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from marshalkv.core.interfaces.cache_backend import Key
from marshalkv.exceptions import BackendError

logger = logging.getLogger(__name__)


class RedisCacheBackend:
    """Redis backend for distributed deployments.

    Values are stored verbatim. Conditional writes use Redis' atomic
    ``SET ... NX`` so concurrent set_if_absent calls on one key cannot
    both succeed. No retries here; callers own retry policy and the
    client owns timeouts.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        """Initialize the Redis backend.

        Args:
            redis_url: Redis connection URL. Ignored when client is given.
            key_prefix: Optional namespace prepended to every key as
                ``<prefix>:<key>``.
            client: Pre-built ``redis.asyncio.Redis`` client.
        """
        self._redis: redis.Redis = client if client is not None else redis.from_url(redis_url)  # type: ignore
        self._key_prefix = key_prefix.encode("utf-8") if key_prefix else None

    async def get(self, key: Key) -> Optional[bytes]:
        """Retrieve stored bytes by key.

        Args:
            key: The key to retrieve.

        Returns:
            The stored bytes, or None if not found or expired.
        """
        with self._backend_errors("GET"):
            return await self._redis.get(self._prefixed_key(key))

    async def set(
        self,
        key: Key,
        value: bytes,
        ttl: Optional[timedelta] = None,
    ) -> None:
        """Store bytes, overwriting any existing value.

        Args:
            key: The key.
            value: The bytes to store.
            ttl: Optional time-to-live. If None, the value does not expire.
        """
        with self._backend_errors("SET"):
            await self._redis.set(
                self._prefixed_key(key), value, px=_milliseconds(ttl)
            )

    async def set_if_absent(
        self,
        key: Key,
        value: bytes,
        ttl: Optional[timedelta] = None,
    ) -> bool:
        """Atomically store bytes only if the key holds no value.

        Args:
            key: The key.
            value: The bytes to store.
            ttl: Optional time-to-live. If None, the value does not expire.

        Returns:
            True if the value was stored, False if the key already existed.
        """
        with self._backend_errors("SET NX"):
            result = await self._redis.set(
                self._prefixed_key(key), value, px=_milliseconds(ttl), nx=True
            )
        return bool(result)

    async def mget(self, keys: Sequence[Key]) -> list[Optional[bytes]]:
        """Retrieve several keys with a single MGET.

        Args:
            keys: Keys to retrieve.

        Returns:
            One entry per requested key, in request order; None for misses.
        """
        if not keys:
            return []
        with self._backend_errors("MGET"):
            return list(
                await self._redis.mget([self._prefixed_key(key) for key in keys])
            )

    async def delete(self, *keys: Key) -> int:
        """Delete keys.

        Args:
            *keys: Keys to delete.

        Returns:
            Number of keys that existed and were deleted.
        """
        if not keys:
            return 0
        with self._backend_errors("DEL"):
            return int(
                await self._redis.delete(*(self._prefixed_key(key) for key in keys))
            )

    async def exists(self, key: Key) -> bool:
        """Check if key exists.

        Args:
            key: The key to check.

        Returns:
            True if the key exists, False otherwise.
        """
        with self._backend_errors("EXISTS"):
            result = await self._redis.exists(self._prefixed_key(key))
        return result > 0

    async def expire(self, key: Key, ttl: timedelta) -> bool:
        """Set a time-to-live on an existing key.

        Args:
            key: The key.
            ttl: Time-to-live from now.

        Returns:
            True if the key existed and the TTL was set.
        """
        with self._backend_errors("PEXPIRE"):
            return bool(
                await self._redis.pexpire(self._prefixed_key(key), _milliseconds(ttl))
            )

    async def clear(self) -> None:
        """Clear all values under our prefix.

        Note: Without a key prefix this removes every key in the database.
        """
        pattern = _escape_glob(self._key_prefix) + b":*" if self._key_prefix else b"*"
        await self._delete_by_pattern(pattern)

    async def _delete_by_pattern(self, pattern: bytes) -> int:
        """Delete keys matching a pattern using SCAN.

        Uses SCAN instead of KEYS for production safety.

        Args:
            pattern: Redis glob pattern.

        Returns:
            Number of keys deleted.
        """
        count = 0
        cursor = 0

        with self._backend_errors("SCAN"):
            while True:
                cursor, keys = await self._redis.scan(cursor, match=pattern, count=100)

                if keys:
                    count += await self._redis.delete(*keys)

                if cursor == 0:
                    break

        return count

    def _prefixed_key(self, key: Key) -> bytes:
        """Encode a key and add the namespace prefix, if any.

        Args:
            key: The key.

        Returns:
            The key as bytes, with prefix.
        """
        raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
        if self._key_prefix is None:
            return raw
        return self._key_prefix + b":" + raw

    @contextmanager
    def _backend_errors(self, command: str) -> Iterator[None]:
        """Re-raise redis client failures as BackendError."""
        try:
            yield
        except RedisError as e:
            logger.warning("Redis %s failed: %s", command, e)
            raise BackendError(f"Redis {command} failed: {e}") from e

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()


def _milliseconds(ttl: Optional[timedelta]) -> Optional[int]:
    """Convert a TTL to whole milliseconds (at least 1), or None."""
    if ttl is None:
        return None
    return max(1, int(ttl.total_seconds() * 1000))


def _escape_glob(value: bytes) -> bytes:
    """Backslash-escape Redis glob metacharacters so value matches literally."""
    return re.sub(rb"([\\*?\[\]])", rb"\\\1", value)
