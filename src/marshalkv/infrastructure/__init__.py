"""Infrastructure layer implementations for marshalkv."""

from marshalkv.infrastructure.backends import InMemoryCacheBackend, RedisCacheBackend
from marshalkv.infrastructure.serializers import JsonSerializer, PickleSerializer

__all__ = [
    "InMemoryCacheBackend",
    "RedisCacheBackend",
    "JsonSerializer",
    "PickleSerializer",
]
