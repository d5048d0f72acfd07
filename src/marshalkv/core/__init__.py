"""Core domain layer for marshalkv."""

from marshalkv.core.entities import (
    ABSENT,
    TTL_ALIASES,
    Absent,
    CallOptions,
    StoreConfig,
)
from marshalkv.core.interfaces import ICacheBackend, ISerializer, Key
from marshalkv.core.services import MarshallingStore

__all__ = [
    # Entities
    "ABSENT",
    "Absent",
    "CallOptions",
    "StoreConfig",
    "TTL_ALIASES",
    # Interfaces
    "ICacheBackend",
    "ISerializer",
    "Key",
    # Services
    "MarshallingStore",
]
