"""Domain entities for marshalkv."""

from marshalkv.core.entities.absent import ABSENT, Absent
from marshalkv.core.entities.call_options import (
    TTL_ALIASES,
    CallOptions,
    coerce_raw,
    coerce_ttl,
    normalize_ttl,
)
from marshalkv.core.entities.store_config import StoreConfig

__all__ = [
    "ABSENT",
    "Absent",
    "CallOptions",
    "StoreConfig",
    "TTL_ALIASES",
    "coerce_raw",
    "coerce_ttl",
    "normalize_ttl",
]
