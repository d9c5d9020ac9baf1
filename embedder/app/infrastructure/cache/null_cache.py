"""Cache manager used when caching is switched off: every lookup misses, nothing is stored."""
from __future__ import annotations

from embedder.app.domain.models import CacheEntry


class NullCache:
    async def get(self, key: str) -> CacheEntry | None:
        return None

    async def put(self, entry: CacheEntry) -> None:
        return


class NullCacheManager:
    def __init__(self) -> None:
        self._cache = NullCache()

    async def add_cache_if_absent(self, name: str) -> NullCache:
        return self._cache

    async def cache_exists(self, name: str) -> bool:
        return False

    async def remove_cache(self, name: str) -> None:
        return

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return
