"""Key-value backend implementations."""

from marshalkv.infrastructure.backends.memory import InMemoryCacheBackend
from marshalkv.infrastructure.backends.redis import RedisCacheBackend

__all__ = [
    "InMemoryCacheBackend",
    "RedisCacheBackend",
]
