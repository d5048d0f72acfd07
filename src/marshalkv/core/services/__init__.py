"""Domain services for marshalkv."""

from marshalkv.core.services.marshalling_store import MarshallingStore, raw_bytes

__all__ = [
    "MarshallingStore",
    "raw_bytes",
]
