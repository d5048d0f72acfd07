"""marshalkv - Transparent marshalling over key-value stores.

A Python library that stores arbitrary Python values in a key-value
backend (Redis or in-memory), serializing on write and deserializing
on read, with per-call raw access and Rack/Merb/Rails-style
expiration options.

Example:
    from types import SimpleNamespace

    from marshalkv import ABSENT, MarshallingStore, RedisCacheBackend

    store = MarshallingStore(RedisCacheBackend("redis://localhost:6379"))

    await store.set("rabbit", SimpleNamespace(name="bunny"))
    rabbit = await store.get("rabbit")             # namespace(name='bunny')
    payload = await store.get("rabbit", raw=True)  # the pickled bytes

    # Conditional write with a TTL; any of expire_after, expires_in
    # or expire_in is accepted
    await store.setnx("rabbit2", rabbit, expires_in=60)

    # Raw strings bypass the serializer entirely
    await store.set("greeting", "hello", raw=True)

    rabbit, missing = await store.mget("rabbit", "nope")
    assert missing is ABSENT
"""

from marshalkv.core.entities import (
    ABSENT,
    TTL_ALIASES,
    Absent,
    CallOptions,
    StoreConfig,
    coerce_ttl,
    normalize_ttl,
)
from marshalkv.core.interfaces import ICacheBackend, ISerializer, Key
from marshalkv.core.services import MarshallingStore, raw_bytes
from marshalkv.exceptions import (
    BackendError,
    DecodeError,
    EncodeError,
    MarshalKVError,
    OptionsError,
    SerializationError,
)
from marshalkv.infrastructure import (
    InMemoryCacheBackend,
    JsonSerializer,
    PickleSerializer,
    RedisCacheBackend,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "ABSENT",
    "Absent",
    "CallOptions",
    "StoreConfig",
    # Option normalization
    "TTL_ALIASES",
    "coerce_ttl",
    "normalize_ttl",
    # Core interfaces
    "ICacheBackend",
    "ISerializer",
    "Key",
    # Core services
    "MarshallingStore",
    "raw_bytes",
    # Infrastructure implementations
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "JsonSerializer",
    "PickleSerializer",
    # Exceptions
    "MarshalKVError",
    "BackendError",
    "OptionsError",
    "SerializationError",
    "EncodeError",
    "DecodeError",
]
