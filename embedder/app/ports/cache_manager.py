"""Port: named cache regions holding oEmbed outcomes. Implementations live in infrastructure.

A region is only ever asked to get and put whole entries; atomicity per key is the
implementation's concern.
"""
from __future__ import annotations

from typing import Protocol

from embedder.app.domain.models import CacheEntry


class Cache(Protocol):
    async def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for `key`, or None on a miss (expired entries are misses)."""
        ...

    async def put(self, entry: CacheEntry) -> None: ...


class CacheManager(Protocol):
    async def add_cache_if_absent(self, name: str) -> Cache: ...

    async def cache_exists(self, name: str) -> bool: ...

    async def remove_cache(self, name: str) -> None: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...
