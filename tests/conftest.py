from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI

from embedder.app.application.document_rewriter import DocumentRewriter
from embedder.app.application.oembed_service import OembedService
from embedder.app.config.settings import Settings
from embedder.app.composition import build_service
from embedder.app.domain.endpoint import OembedEndpoint
from embedder.app.infrastructure.cache.inmemory.in_memory_cache import InMemoryCacheManager
from embedder.app.ports.http_client import RequestTimeout
from embedder.app.routers.health import health_router
from embedder.app.routers.oembed import oembed_router

RICH_JSON = (
    b'{"author_name":"Michael J. Simons","author_url":"http://michael-simons.eu","cache_age":86400,'
    b'"html":"<iframe width=\'1024\' height=\'576\' src=\'https://biking.michael-simons.eu/tracks/1/embed\'></iframe>",'
    b'"provider_name":"biking2","provider_url":"https://biking.michael-simons.eu",'
    b'"title":"Aachen - Maastricht - Aachen","type":"rich","version":"1.0"}'
)

PHOTO_JSON = b'{"type":"photo","version":"1.0","url":"https://img.example.com/1.jpg","width":200,"height":100}'


class FakeResponse:
    """Implements HttpResponse for tests."""

    def __init__(self, status_code: int = 200, content: bytes | str = b"", *, url: str = "", headers: dict[str, str] | None = None) -> None:
        self.status_code = status_code
        self.content = content.encode() if isinstance(content, str) else content
        self.url = url
        self.headers = headers or {}

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class FakeHttpClient:
    """Implements AbstractHttpClient; answers by exact URL and records every call."""

    def __init__(self, routes: dict[str, FakeResponse | Exception] | None = None) -> None:
        self.routes: dict[str, FakeResponse | Exception] = dict(routes or {})
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def add(self, url: str, answer: FakeResponse | Exception) -> None:
        self.routes[url] = answer

    def urls(self) -> list[str]:
        return [call["url"] for call in self.calls]

    async def get(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        follow_redirects: bool = True,
        headers: dict[str, str] | None = None,
    ) -> FakeResponse:
        self.calls.append({"url": url, "headers": dict(headers or {}), "timeout": timeout})
        answer = self.routes.get(url)
        if answer is None:
            return FakeResponse(404, b"not found", url=url)
        if isinstance(answer, Exception):
            raise answer
        if not answer.url:
            answer.url = url
        return answer

    async def close(self) -> None:
        self.closed = True


class FailingCacheManager:
    """CacheManager whose regions blow up on every access."""

    def __init__(self) -> None:
        self.puts = 0

    async def add_cache_if_absent(self, name: str) -> "FailingCacheManager":
        return self

    async def get(self, key: str) -> None:
        raise RuntimeError("cache down")

    async def put(self, entry: Any) -> None:
        self.puts += 1
        raise RuntimeError("cache down")

    async def cache_exists(self, name: str) -> bool:
        return False

    async def remove_cache(self, name: str) -> None:
        return

    async def ping(self) -> bool:
        return False

    async def close(self) -> None:
        return


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


BIKING = OembedEndpoint(
    name="biking",
    endpoint="https://biking.michael-simons.eu/oembed",
    url_schemes=("https://biking\\.michael-simons\\.eu/tracks/.*",),
)

PHOTOS = OembedEndpoint(
    name="photos",
    endpoint="https://photos.example.com/oembed.%{format}",
    url_schemes=("https://photos\\.example\\.com/p/\\d+",),
)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {"application_name": "", "autodiscovery": False, "cache_backend": "memory"}
    values.update(overrides)
    return Settings().model_copy(update=values)


def make_service(
    client: FakeHttpClient,
    endpoints: list[OembedEndpoint] | None = None,
    *,
    cache_manager: Any | None = None,
    **settings: Any,
) -> tuple[OembedService, DocumentRewriter]:
    return build_service(
        settings=make_settings(**settings),
        http_client=client,
        cache_manager=cache_manager if cache_manager is not None else InMemoryCacheManager(),
        endpoints=[BIKING, PHOTOS] if endpoints is None else endpoints,
    )


@pytest.fixture()
def http_client() -> FakeHttpClient:
    return FakeHttpClient()


@pytest.fixture()
def test_app(http_client: FakeHttpClient) -> FastAPI:
    service, rewriter = make_service(http_client)
    app = FastAPI()
    app.state.settings = make_settings()
    app.state.cache_manager = service.cache_manager
    app.state.oembed_service = service
    app.state.rewriter = rewriter
    app.include_router(health_router)
    app.include_router(oembed_router)
    return app
