"""Cache backend interface."""

from collections.abc import Sequence
from datetime import timedelta
from typing import Protocol, TypeAlias

Key: TypeAlias = str | bytes


class ICacheBackend(Protocol):
    """Contract for key-value storage backends.

    All backends must implement this protocol to be used with
    MarshallingStore. Backends store bytes verbatim and treat keys
    as binary-safe. Failures of the underlying store are raised as
    BackendError.
    """

    async def get(self, key: Key) -> bytes | None:
        """Retrieve stored bytes by key.

        Args:
            key: The key to retrieve.

        Returns:
            The stored bytes, or None if not found or expired.
        """
        ...

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
        ...

    async def set_if_absent(
        self,
        key: Key,
        value: bytes,
        ttl: timedelta | None = None,
    ) -> bool:
        """Atomically store bytes only if the key holds no value.

        Args:
            key: The key.
            value: The bytes to store.
            ttl: Optional time-to-live. If None, the value does not expire.

        Returns:
            True if the value was stored, False if the key already existed.
        """
        ...

    async def mget(self, keys: Sequence[Key]) -> list[bytes | None]:
        """Retrieve several keys in one round trip.

        Args:
            keys: Keys to retrieve.

        Returns:
            One entry per requested key, in request order; None for misses.
        """
        ...

    async def delete(self, *keys: Key) -> int:
        """Delete keys.

        Args:
            *keys: Keys to delete.

        Returns:
            Number of keys that existed and were deleted.
        """
        ...

    async def exists(self, key: Key) -> bool:
        """Check if key holds a value.

        Args:
            key: The key to check.

        Returns:
            True if the key exists, False otherwise.
        """
        ...

    async def expire(self, key: Key, ttl: timedelta) -> bool:
        """Set a time-to-live on an existing key.

        Args:
            key: The key.
            ttl: Time-to-live from now.

        Returns:
            True if the key existed and the TTL was set.
        """
        ...

    async def clear(self) -> None:
        """Remove all stored values."""
        ...
