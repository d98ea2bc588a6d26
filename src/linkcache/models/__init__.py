from __future__ import annotations

from linkcache.models.cache import (
    CACHE_VERSION,
    CacheDocument,
    ExternalRecord,
    InternalRecord,
    LinkObservation,
    LinkType,
)

__all__ = [
    "CACHE_VERSION",
    "CacheDocument",
    "ExternalRecord",
    "InternalRecord",
    "LinkObservation",
    "LinkType",
]
