"""Cache manager factory: selects implementation from config. Only place that imports concrete caches."""
from __future__ import annotations

from embedder.app.config.settings import Settings
from embedder.app.constants import CacheBackend
from embedder.app.domain.errors import OembedConfigurationError
from embedder.app.infrastructure.cache.inmemory.in_memory_cache import InMemoryCacheManager
from embedder.app.infrastructure.cache.mongo.mongo_cache import MongoCacheManager
from embedder.app.infrastructure.cache.mongo.mongo_connection import MongoConnection
from embedder.app.infrastructure.cache.null_cache import NullCacheManager
from embedder.app.ports.cache_manager import CacheManager


async def create_cache_manager(settings: Settings) -> CacheManager:
    backend = settings.cache_backend.strip().lower()

    if backend in (CacheBackend.NONE, "off", ""):
        return NullCacheManager()

    if backend == CacheBackend.MEMORY:
        return InMemoryCacheManager(max_entries=settings.memory_cache_max_entries)

    if backend == CacheBackend.MONGO:
        connection = MongoConnection(settings)
        await connection.connect()
        return MongoCacheManager(connection.database, connection=connection)

    raise OembedConfigurationError(f"Unsupported cache backend: {backend}")
