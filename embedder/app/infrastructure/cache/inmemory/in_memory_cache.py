"""In-process cache manager: one dict per region, entries expire on a monotonic clock.

Suited to a single process; entries are not shared between workers. Each region is
bounded: expired entries are swept on writes at most once per sweep interval, and the
least recently used entry is evicted once `max_entries` is exceeded.
"""
from __future__ import annotations

import time
from collections import OrderedDict
from typing import Callable

from loguru import logger

from embedder.app.constants import DEFAULT_MEMORY_CACHE_MAX_ENTRIES, MIN_CACHE_AGE_SECONDS
from embedder.app.domain.models import CacheEntry


class InMemoryCache:
    def __init__(
        self,
        name: str,
        clock: Callable[[], float],
        *,
        max_entries: int = DEFAULT_MEMORY_CACHE_MAX_ENTRIES,
        sweep_interval_seconds: float = MIN_CACHE_AGE_SECONDS,
    ) -> None:
        self.name = name
        self._clock = clock
        self._max_entries = max(1, max_entries)
        self._sweep_interval = sweep_interval_seconds
        self._next_sweep = clock() + sweep_interval_seconds
        self._entries: OrderedDict[str, tuple[float, CacheEntry]] = OrderedDict()

    async def get(self, key: str) -> CacheEntry | None:
        item = self._entries.get(key)
        if item is None:
            return None
        expires_at, entry = item
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry

    async def put(self, entry: CacheEntry) -> None:
        now = self._clock()
        if now >= self._next_sweep:
            self.sweep(now)
        self._entries[entry.key] = (now + entry.ttl_seconds, entry)
        self._entries.move_to_end(entry.key)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def sweep(self, now: float | None = None) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock() if now is None else now
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._next_sweep = now + self._sweep_interval
        if expired:
            logger.debug("Swept {} expired entries from cache region '{}'", len(expired), self.name)
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class InMemoryCacheManager:
    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        *,
        max_entries: int = DEFAULT_MEMORY_CACHE_MAX_ENTRIES,
    ) -> None:
        self._clock = clock
        self._max_entries = max_entries
        self._caches: dict[str, InMemoryCache] = {}

    async def add_cache_if_absent(self, name: str) -> InMemoryCache:
        cache = self._caches.get(name)
        if cache is None:
            cache = self._caches[name] = InMemoryCache(name, self._clock, max_entries=self._max_entries)
        return cache

    async def cache_exists(self, name: str) -> bool:
        return name in self._caches

    async def remove_cache(self, name: str) -> None:
        self._caches.pop(name, None)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._caches.clear()
