"""Core interfaces (Protocol classes) for marshalkv."""

from marshalkv.core.interfaces.cache_backend import ICacheBackend, Key
from marshalkv.core.interfaces.serializer import ISerializer

__all__ = [
    "ICacheBackend",
    "ISerializer",
    "Key",
]
