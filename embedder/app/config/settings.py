"""Settings for the embedding service."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    application_name: str = Field("", validation_alias="APPLICATION_NAME")
    autodiscovery: bool = Field(False, validation_alias="AUTODISCOVERY")
    endpoints_file: str = Field("", validation_alias="ENDPOINTS_FILE")

    cache_backend: str = Field("memory", validation_alias="CACHE_BACKEND")
    cache_name: str = Field("embedder.oembed", validation_alias="CACHE_NAME")
    memory_cache_max_entries: int = Field(10_000, validation_alias="MEMORY_CACHE_MAX_ENTRIES")
    # Seconds; used when a response carries no cache_age of its own.
    default_cache_age: int = Field(3600, validation_alias="DEFAULT_CACHE_AGE")
    # Seconds a URL without a usable response stays cached. Falls back to default_cache_age.
    ignore_failed_urls_for_seconds: int | None = Field(None, validation_alias="IGNORE_FAILED_URLS_FOR_SECONDS")

    fetch_connect_timeout_seconds: float = Field(5.0, validation_alias="FETCH_CONNECT_TIMEOUT_SECONDS")
    fetch_read_timeout_seconds: float = Field(15.0, validation_alias="FETCH_READ_TIMEOUT_SECONDS")

    database_host: str = Field("localhost", validation_alias="DATABASE_HOST")
    database_port: int = Field(27017, validation_alias="DATABASE_PORT")
    database_user: str = Field("", validation_alias="DATABASE_USER")
    database_password: str = Field("", validation_alias="DATABASE_PASSWORD")
    database_name: str = Field("embedder", validation_alias="DATABASE_NAME")
    database_connection_timeout_ms: int = Field(5000, validation_alias="DATABASE_CONNECTION_TIMEOUT_MS")

    initial_backoff_seconds: float = Field(1.0, validation_alias="INITIAL_BACKOFF_SECONDS")
    max_backoff_seconds: float = Field(30.0, validation_alias="MAX_BACKOFF_SECONDS")
    max_connection_attempts: int = Field(5, validation_alias="MAX_CONNECTION_ATTEMPTS")
    backoff_multiplier: float = Field(2.0, validation_alias="BACKOFF_MULTIPLIER")

    readiness_ping_timeout_seconds: float = Field(30.0, validation_alias="READINESS_PING_TIMEOUT_SECONDS")
