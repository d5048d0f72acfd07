"""Marshalling store - transparent serialization over a key-value backend."""

import logging
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

from marshalkv.core.entities.absent import ABSENT, Absent
from marshalkv.core.entities.call_options import CallOptions, coerce_ttl
from marshalkv.core.entities.store_config import StoreConfig
from marshalkv.core.interfaces.cache_backend import ICacheBackend, Key
from marshalkv.core.interfaces.serializer import ISerializer
from marshalkv.exceptions import DecodeError
from marshalkv.infrastructure.serializers.pickle import PickleSerializer

logger = logging.getLogger(__name__)

Options = CallOptions | Mapping[str, Any] | None


def raw_bytes(value: Any, encoding: str = "utf-8") -> bytes:
    """Return the bytes written for a value in raw mode.

    Args:
        value: Bytes-like values are kept as is; strings are encoded;
            anything else is stored as its string representation.
        encoding: Encoding used for text.

    Returns:
        The raw payload.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode(encoding)
    return str(value).encode(encoding)


class MarshallingStore:
    """Key-value store that marshals values on the way in and out.

    Values written through set/setnx are serialized and values read
    through get/mget are deserialized, unless the call passes
    ``raw=True`` (or the store is configured without marshalling),
    in which case bytes go through untouched.

    Example:
        store = MarshallingStore(InMemoryCacheBackend())

        await store.set("rabbit", SimpleNamespace(name="bunny"))
        await store.get("rabbit")            # namespace(name='bunny')
        await store.get("rabbit", raw=True)  # pickled bytes

        await store.setnx("rabbit", other, expires_in=60)  # no-op

    The store keeps no per-call state; concurrency guarantees are
    those of the backend.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        serializer: ISerializer | None = None,
        config: StoreConfig | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            backend: The key-value backend holding the bytes.
            serializer: Codec for marshalled values. Defaults to pickle.
            config: Optional store configuration. Uses defaults if not provided.
        """
        self._backend = backend
        self._serializer = serializer or PickleSerializer()
        self._config = config or StoreConfig()

    @property
    def backend(self) -> ICacheBackend:
        """Get the underlying backend."""
        return self._backend

    @property
    def serializer(self) -> ISerializer:
        """Get the serializer used for marshalled values."""
        return self._serializer

    @property
    def config(self) -> StoreConfig:
        """Get the store configuration."""
        return self._config

    async def get(self, key: Key, options: Options = None, **kwargs: Any) -> Any:
        """Read a value.

        Args:
            key: The key to read.
            options: Call options (``raw``); keyword options override.

        Returns:
            The decoded value, the stored bytes in raw mode, or ABSENT.

        Raises:
            DecodeError: If the stored bytes cannot be decoded.
            BackendError: If the backend fails.
        """
        call = CallOptions.resolve(options, **kwargs)
        data = await self._backend.get(key)
        return self._load(key, data, call)

    async def set(
        self, key: Key, value: Any, options: Options = None, **kwargs: Any
    ) -> None:
        """Write a value, replacing whatever the key held.

        Args:
            key: The key to write.
            value: The value to store.
            options: Call options (``raw`` and a TTL alias such as
                ``expires_in``); keyword options override.

        Raises:
            EncodeError: If the value cannot be serialized.
            OptionsError: If an option value is invalid.
            BackendError: If the backend fails.
        """
        call = CallOptions.resolve(options, **kwargs)
        await self._backend.set(key, self._dump(value, call), call.ttl)

    async def setnx(
        self, key: Key, value: Any, options: Options = None, **kwargs: Any
    ) -> bool:
        """Write a value only if the key holds none.

        Relies on the backend's atomic set-if-absent; an existing value
        is never read, re-encoded or touched.

        Args:
            key: The key to write.
            value: The value to store.
            options: Call options (``raw`` and a TTL alias); keyword
                options override.

        Returns:
            True if the value was stored, False if the key already existed.

        Raises:
            EncodeError: If the value cannot be serialized.
            OptionsError: If an option value is invalid.
            BackendError: If the backend fails.
        """
        call = CallOptions.resolve(options, **kwargs)
        stored = await self._backend.set_if_absent(
            key, self._dump(value, call), call.ttl
        )
        if not stored:
            logger.debug("setnx skipped, key already exists: %r", key)
        return stored

    set_unless_exists = setnx

    async def mget(
        self, *keys: Key | Iterable[Key], options: Options = None, **kwargs: Any
    ) -> list[Any]:
        """Read several values in one backend round trip.

        Keys may be given positionally (``mget("a", "b")``) or as one
        iterable of keys (``mget(["a", "b"])``, ``mget(k for k in ...)``).
        The raw/decode decision applies to every item alike.

        Args:
            *keys: Keys to read.
            options: Call options (``raw``); keyword options override.

        Returns:
            One result per key in request order; ABSENT for misses.

        Raises:
            DecodeError: If any item cannot be decoded. The whole call
                fails; ``DecodeError.key`` names the first bad key.
            BackendError: If the backend fails.
        """
        call = CallOptions.resolve(options, **kwargs)
        key_list = _flatten_keys(keys)
        if not key_list:
            return []

        values = await self._backend.mget(key_list)
        return [self._load(key, data, call) for key, data in zip(key_list, values)]

    async def delete(self, *keys: Key) -> int:
        """Delete keys.

        Args:
            *keys: Keys to delete.

        Returns:
            Number of keys that existed and were deleted.
        """
        if not keys:
            return 0
        return await self._backend.delete(*keys)

    async def exists(self, key: Key) -> bool:
        """Check whether a key holds a value."""
        return await self._backend.exists(key)

    async def expire(self, key: Key, ttl: int | float | timedelta) -> bool:
        """Set a time-to-live on an existing key.

        Args:
            key: The key.
            ttl: Seconds or a timedelta from now.

        Returns:
            True if the key existed and the TTL was set.

        Raises:
            OptionsError: If the TTL is not a positive duration.
        """
        return await self._backend.expire(key, coerce_ttl(ttl))

    def _marshal(self, call: CallOptions) -> bool:
        return self._config.marshalling and not call.raw

    def _dump(self, value: Any, call: CallOptions) -> bytes:
        """Encode a value for storage according to the call's mode."""
        if self._marshal(call):
            return self._serializer.serialize(value)
        return raw_bytes(value, self._config.encoding)

    def _load(self, key: Key, data: bytes | None, call: CallOptions) -> Any | Absent:
        """Decode a stored payload according to the call's mode."""
        if data is None:
            return ABSENT
        if not self._marshal(call):
            return data
        if not data:
            # Only a raw write of "" leaves an empty payload
            return ""
        try:
            return self._serializer.deserialize(data)
        except DecodeError as e:
            logger.warning("Failed to decode value stored at %r: %s", key, e)
            e.key = key
            raise


def _flatten_keys(keys: tuple[Key | Iterable[Key], ...]) -> list[Key]:
    """Accept either positional keys or a single iterable of keys."""
    if len(keys) == 1 and not isinstance(keys[0], (str, bytes, bytearray, memoryview)):
        return list(keys[0])
    return list(keys)  # type: ignore[arg-type]
