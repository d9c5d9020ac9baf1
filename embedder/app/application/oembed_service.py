from __future__ import annotations

from typing import Any

from loguru import logger

from embedder.app.constants import (
    DEFAULT_CACHE_AGE_SECONDS,
    DEFAULT_CACHE_NAME,
    MAX_CACHE_AGE_SECONDS,
    MIN_CACHE_AGE_SECONDS,
)
from embedder.app.core import SERVICE_NAME
from embedder.app.domain.endpoint import OembedEndpoint
from embedder.app.domain.models import CacheEntry, OembedResponse
from embedder.app.domain.oembed_fetcher import OembedFetcher
from embedder.app.domain.resolver import EndpointResolver
from embedder.app.ports.cache_manager import Cache, CacheManager


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def clamp_cache_age(seconds: int) -> int:
    return int(min(max(MIN_CACHE_AGE_SECONDS, seconds), MAX_CACHE_AGE_SECONDS))


class OembedService:
    """
    Resolves URLs to oEmbed responses through a cache region.

    Every outcome of a lookup is cached, including "nothing found", so a URL is fetched
    at most once per TTL window. Positive entries live for the response's cache_age
    (or default_cache_age); negative ones for ignore_failed_urls_for_seconds when set,
    else default_cache_age. Both are clamped to [60s, 2**31-1s].
    """

    def __init__(
        self,
        resolver: EndpointResolver,
        fetcher: OembedFetcher,
        cache_manager: CacheManager,
        *,
        cache_name: str = DEFAULT_CACHE_NAME,
        default_cache_age: int = DEFAULT_CACHE_AGE_SECONDS,
        ignore_failed_urls_for_seconds: int | None = None,
    ) -> None:
        self._resolver = resolver
        self._fetcher = fetcher
        self._cache_manager = cache_manager
        self._cache_name = cache_name
        self.default_cache_age = default_cache_age
        self.ignore_failed_urls_for_seconds = ignore_failed_urls_for_seconds
        _log(
            "oembed_service_ready",
            endpoints=len(resolver.endpoints),
            autodiscovery=resolver.autodiscovery,
            cache=type(self._cache_manager).__name__,
        )

    @property
    def resolver(self) -> EndpointResolver:
        return self._resolver

    @property
    def cache_manager(self) -> CacheManager:
        return self._cache_manager

    @property
    def cache_name(self) -> str:
        return self._cache_name

    async def set_cache_name(self, cache_name: str) -> None:
        """Switch cache regions, discarding the current one if it exists."""
        if await self._cache_manager.cache_exists(self._cache_name):
            await self._cache_manager.remove_cache(self._cache_name)
        self._cache_name = cache_name

    def ttl_for(self, response: OembedResponse | None) -> int:
        if response is None:
            seconds = self.ignore_failed_urls_for_seconds
            if seconds is None:
                seconds = self.default_cache_age
        elif response.cache_age is not None:
            seconds = response.cache_age
        else:
            seconds = self.default_cache_age
        return clamp_cache_age(seconds)

    async def find_endpoint_for(self, url: str) -> OembedEndpoint | None:
        return await self._resolver.resolve(url)

    async def get_oembed_response_for(self, url: str | None) -> OembedResponse | None:
        trimmed = (url or "").strip()
        if not trimmed:
            logger.debug("Ignoring empty url...")
            return None

        cache = await self._region()
        cached = await self._cache_get(cache, trimmed) if cache is not None else None
        if cached is not None:
            logger.debug("Using cached {} entry for '{}'", "negative" if cached.is_negative else "positive", trimmed)
            return cached.response

        endpoint = await self.find_endpoint_for(trimmed)
        logger.debug("Found endpoint {} for '{}'", endpoint.name if endpoint else None, trimmed)
        response = await self._fetcher.fetch(endpoint, trimmed) if endpoint is not None else None

        entry = CacheEntry(key=trimmed, response=response, ttl_seconds=self.ttl_for(response))
        if cache is not None:
            await self._cache_put(cache, entry)
        return response

    async def _region(self) -> Cache | None:
        try:
            return await self._cache_manager.add_cache_if_absent(self._cache_name)
        except Exception as exc:
            logger.bind(service_name=SERVICE_NAME, event="cache_unavailable", cache_name=self._cache_name).warning("{}", exc)
            return None

    async def _cache_get(self, cache: Cache, key: str) -> CacheEntry | None:
        try:
            return await cache.get(key)
        except Exception as exc:
            logger.bind(service_name=SERVICE_NAME, event="cache_get_failed", url=key).warning("{}", exc)
            return None

    async def _cache_put(self, cache: Cache, entry: CacheEntry) -> None:
        try:
            await cache.put(entry)
            logger.debug("Cached {} for {} seconds for url '{}'", entry.response, entry.ttl_seconds, entry.key)
        except Exception as exc:
            logger.bind(service_name=SERVICE_NAME, event="cache_put_failed", url=entry.key).warning("{}", exc)
