"""HTTP client factory: builds AbstractHttpClient from settings."""
from __future__ import annotations

import httpx

from embedder.app.config.settings import Settings
from embedder.app.ports.http_client import AbstractHttpClient
from embedder.app.infrastructure.http.httpx_client import HttpxHttpClient


def create_http_client(settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> AbstractHttpClient:
    """Build an HTTP client. Timeouts are applied per-request by the adapter."""
    async_client = httpx.AsyncClient(transport=transport)
    return HttpxHttpClient(async_client)
