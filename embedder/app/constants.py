"""Service-level constants shared across modules."""
from __future__ import annotations

# Cache entries live at least a minute and at most as long as a signed 32-bit TTL allows.
MIN_CACHE_AGE_SECONDS = 60
MAX_CACHE_AGE_SECONDS = 2**31 - 1

DEFAULT_CACHE_AGE_SECONDS = 3600
DEFAULT_CACHE_NAME = "embedder.oembed"
# Per region, for the in-process cache backend.
DEFAULT_MEMORY_CACHE_MAX_ENTRIES = 10_000


class CacheBackend:
    NONE = "none"
    MEMORY = "memory"
    MONGO = "mongo"
