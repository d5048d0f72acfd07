"""Serializer implementations."""

from marshalkv.infrastructure.serializers.json import JsonSerializer
from marshalkv.infrastructure.serializers.pickle import PickleSerializer

__all__ = [
    "JsonSerializer",
    "PickleSerializer",
]
