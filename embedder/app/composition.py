"""Composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle. No DI container library; explicit wiring only.
"""
from __future__ import annotations

import platform
from typing import Any, Sequence

from loguru import logger

from embedder.app.application.document_rewriter import DocumentRewriter
from embedder.app.application.oembed_service import OembedService
from embedder.app.config.endpoints import load_endpoints
from embedder.app.config.settings import Settings
from embedder.app.core import SERVICE_NAME, VERSION
from embedder.app.domain.autodiscovery import AutodiscoveryProbe
from embedder.app.domain.endpoint import OembedEndpoint
from embedder.app.domain.oembed_fetcher import OembedFetcher
from embedder.app.domain.registry import StrategyRegistry, default_renderers, default_request_providers
from embedder.app.domain.request_providers import user_agent_header
from embedder.app.domain.resolver import EndpointResolver
from embedder.app.infrastructure.cache.factory import create_cache_manager
from embedder.app.infrastructure.http.factory import create_http_client
from embedder.app.infrastructure.parsers.factory import create_parsers
from embedder.app.ports.cache_manager import CacheManager
from embedder.app.ports.http_client import AbstractHttpClient, RequestTimeout
from embedder.app.ports.renderer import Renderer
from embedder.app.ports.request_provider import RequestProvider


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def default_user_agent() -> str:
    return f"Python/{platform.python_version()} link-embedder/{VERSION}"


def build_service(
    *,
    settings: Settings,
    http_client: AbstractHttpClient,
    cache_manager: CacheManager,
    endpoints: Sequence[OembedEndpoint],
    request_provider_registry: StrategyRegistry[RequestProvider] | None = None,
    renderer_registry: StrategyRegistry[Renderer] | None = None,
) -> tuple[OembedService, DocumentRewriter]:
    """Wire the service and rewriter around already-built infrastructure."""
    request_provider_registry = request_provider_registry or default_request_providers()
    renderer_registry = renderer_registry or default_renderers()

    timeout = RequestTimeout(
        connect_seconds=settings.fetch_connect_timeout_seconds,
        read_seconds=settings.fetch_read_timeout_seconds,
    )
    user_agent = default_user_agent()
    application_name = settings.application_name or None

    request_providers = {
        endpoint.name: request_provider_registry.create(endpoint.request_provider, endpoint.request_provider_options)
        for endpoint in endpoints
    }
    renderers = [
        (endpoint, renderer_registry.create(endpoint.renderer, endpoint.renderer_options))
        for endpoint in endpoints
    ]

    probe = AutodiscoveryProbe(
        http_client,
        timeout,
        default_headers={"User-Agent": user_agent_header(user_agent, application_name)},
    )
    resolver = EndpointResolver(endpoints, probe, autodiscovery=settings.autodiscovery)
    fetcher = OembedFetcher(
        http_client,
        create_parsers(),
        timeout,
        user_agent=user_agent,
        application_name=application_name,
        request_providers=request_providers,
    )
    service = OembedService(
        resolver,
        fetcher,
        cache_manager,
        cache_name=settings.cache_name,
        default_cache_age=settings.default_cache_age,
        ignore_failed_urls_for_seconds=settings.ignore_failed_urls_for_seconds,
    )
    _log("oembed_ready", user_agent=user_agent, application_name=application_name)
    return service, DocumentRewriter(service, renderers)


class AppDependencies:
    """Holds wired dependencies and their lifecycle. Built only in composition root."""

    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._http_client: AbstractHttpClient | None = None
        self._cache_manager: CacheManager | None = None
        self._service: OembedService | None = None
        self._rewriter: DocumentRewriter | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache_manager(self) -> CacheManager:
        if self._cache_manager is None:
            raise RuntimeError("cache_manager is not initialized")
        return self._cache_manager

    @property
    def service(self) -> OembedService:
        if self._service is None:
            raise RuntimeError("service is not initialized")
        return self._service

    @property
    def rewriter(self) -> DocumentRewriter:
        if self._rewriter is None:
            raise RuntimeError("rewriter is not initialized")
        return self._rewriter

    async def connect(self) -> None:
        endpoints = load_endpoints(self._settings.endpoints_file)
        self._http_client = create_http_client(self._settings)
        try:
            self._cache_manager = await create_cache_manager(self._settings)
        except Exception:
            await self._http_client.close()
            self._http_client = None
            raise
        self._service, self._rewriter = build_service(
            settings=self._settings,
            http_client=self._http_client,
            cache_manager=self._cache_manager,
            endpoints=endpoints,
        )

    async def close(self) -> None:
        if self._http_client is not None:
            try:
                await self._http_client.close()
            except Exception as exc:
                logger.warning("http client close failed: {}", exc)
            self._http_client = None

        if self._cache_manager is not None:
            try:
                await self._cache_manager.close()
            except Exception as exc:
                logger.warning("cache manager close failed: {}", exc)
            self._cache_manager = None

        self._service = None
        self._rewriter = None


def create_app_dependencies(settings: Settings | None = None) -> AppDependencies:
    return AppDependencies(settings=settings or Settings())
