"""MongoDB cache manager: one collection per cache region.

Documents look like `{_id: <url>, response: <wire dict> | None, expires_at: <datetime>}`.
A TTL index purges expired documents; since the purge runs only periodically, reads
also filter on `expires_at`.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from embedder.app.domain.models import CacheEntry, OembedResponse
from embedder.app.infrastructure.cache.mongo.constants import COLLECTION_PREFIX, EXPIRES_AT_INDEX
from embedder.app.infrastructure.cache.mongo.mongo_connection import MongoConnection


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _dump(response: OembedResponse | None) -> dict[str, Any] | None:
    if response is None:
        return None
    document = response.to_wire()
    document["source"] = response.source
    document["original_url"] = response.original_url
    return document


def _load(document: dict[str, Any] | None) -> OembedResponse | None:
    if document is None:
        return None
    source = document.pop("source", None)
    original_url = document.pop("original_url", None)
    return OembedResponse.model_validate(document).stamped(source=source, original_url=original_url)


class MongoCache:
    def __init__(self, collection: AsyncIOMotorCollection, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._collection = collection
        self._clock = clock

    async def ensure_indexes(self) -> None:
        await self._collection.create_index("expires_at", expireAfterSeconds=0, name=EXPIRES_AT_INDEX)

    async def get(self, key: str) -> CacheEntry | None:
        doc = await self._collection.find_one({"_id": key, "expires_at": {"$gt": self._clock()}})
        if not doc:
            return None
        return CacheEntry(key=key, response=_load(doc.get("response")), ttl_seconds=int(doc.get("ttl_seconds", 0)))

    async def put(self, entry: CacheEntry) -> None:
        now = self._clock()
        await self._collection.replace_one(
            {"_id": entry.key},
            {
                "_id": entry.key,
                "response": _dump(entry.response),
                "ttl_seconds": entry.ttl_seconds,
                "cached_at": now,
                "expires_at": now + timedelta(seconds=entry.ttl_seconds),
            },
            upsert=True,
        )


class MongoCacheManager:
    def __init__(self, database: AsyncIOMotorDatabase, *, connection: MongoConnection | None = None) -> None:
        self._database = database
        self._connection = connection
        self._caches: dict[str, MongoCache] = {}

    @staticmethod
    def collection_name(name: str) -> str:
        return f"{COLLECTION_PREFIX}{name}"

    async def add_cache_if_absent(self, name: str) -> MongoCache:
        cache = self._caches.get(name)
        if cache is None:
            cache = MongoCache(self._database[self.collection_name(name)])
            await cache.ensure_indexes()
            self._caches[name] = cache
        return cache

    async def cache_exists(self, name: str) -> bool:
        return self.collection_name(name) in await self._database.list_collection_names()

    async def remove_cache(self, name: str) -> None:
        self._caches.pop(name, None)
        await self._database.drop_collection(self.collection_name(name))

    async def ping(self) -> bool:
        if self._connection is None:
            return True
        return await self._connection.ping()

    async def close(self) -> None:
        self._caches.clear()
        if self._connection is not None:
            await self._connection.close()
