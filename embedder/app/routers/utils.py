from __future__ import annotations

from urllib.parse import urlsplit

from fastapi import Request

from embedder.app.config.settings import Settings

DEFAULT_READINESS_TIMEOUT_SECONDS = 30.0


def app_settings(request: Request) -> Settings | None:
    return getattr(request.app.state, "settings", None)


def readiness_ping_timeout_seconds(request: Request) -> float:
    """Timeout for the cache ping behind /health/ready."""
    settings = app_settings(request)
    if settings is None:
        return DEFAULT_READINESS_TIMEOUT_SECONDS
    return settings.readiness_ping_timeout_seconds


def is_embeddable_url(url: str) -> bool:
    """Only absolute http(s) URLs can have an oEmbed representation."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(parts.hostname)
