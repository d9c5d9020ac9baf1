import inspect
from typing import Any
from urllib.parse import quote_plus

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from embedder.app.config.settings import Settings
from embedder.app.core import SERVICE_NAME
from embedder.app.core.backoff import BackoffPolicy, backoff_attempts
from embedder.app.infrastructure.cache.mongo.constants import ConnectionState


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def mongo_uri(settings: Settings) -> str:
    address = f"{settings.database_host}:{settings.database_port}"
    if settings.database_user and settings.database_password:
        credentials = f"{quote_plus(settings.database_user)}:{quote_plus(settings.database_password)}"
        return f"mongodb://{credentials}@{address}"
    return f"mongodb://{address}"


class MongoConnection:
    """Owns the motor client behind the Mongo cache; connects with exponential backoff."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._state = ConnectionState.DISCONNECTED
        self._client: AsyncIOMotorClient | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._client is None:
            raise RuntimeError("cache database is not connected")
        return self._client[self._settings.database_name]

    async def connect(self) -> None:
        settings = self._settings
        self._state = ConnectionState.CONNECTING
        policy = BackoffPolicy(
            initial_seconds=settings.initial_backoff_seconds,
            max_seconds=settings.max_backoff_seconds,
            multiplier=settings.backoff_multiplier,
            max_attempts=settings.max_connection_attempts,
        )
        async for attempts in backoff_attempts(policy):
            _log("cache_db_connect_attempt", attempt=attempts, database=settings.database_name)
            client = AsyncIOMotorClient(
                mongo_uri(settings),
                serverSelectionTimeoutMS=settings.database_connection_timeout_ms,
                tz_aware=True,
            )
            try:
                await client.admin.command("ping")
            except Exception as exc:
                logger.warning("cache database unreachable: {}", exc)
                await self._close_client(client)
                if attempts >= settings.max_connection_attempts:
                    self._state = ConnectionState.DISCONNECTED
                    _log("cache_db_connect_failed", attempt=attempts)
                    raise
                continue
            self._client = client
            self._state = ConnectionState.CONNECTED
            _log("cache_db_connected", attempt=attempts)
            return
        self._state = ConnectionState.DISCONNECTED

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except Exception as exc:
            logger.warning("cache database ping failed: {}", exc)
            return False
        return True

    async def close(self) -> None:
        if self._client is not None:
            await self._close_client(self._client)
            self._client = None
        self._state = ConnectionState.DISCONNECTED

    @staticmethod
    async def _close_client(client: AsyncIOMotorClient) -> None:
        # motor's close() is sync; newer pymongo async clients return an awaitable
        result = client.close()
        if inspect.isawaitable(result):
            await result
