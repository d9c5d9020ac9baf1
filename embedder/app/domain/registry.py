"""Named strategy registries for request providers and renderers.

Endpoints refer to strategies by name; each factory receives the endpoint's option
mapping and validates it into the strategy's own options model.
"""
from __future__ import annotations

from typing import Any, Callable, Generic, Mapping, TypeVar

from pydantic import ValidationError

from embedder.app.domain.errors import OembedConfigurationError
from embedder.app.domain.renderers import DefaultRenderer, LinkCardOptions, LinkCardRenderer
from embedder.app.domain.request_providers import (
    AccessTokenOptions,
    AccessTokenRequestProvider,
    DefaultRequestProvider,
)
from embedder.app.ports.renderer import Renderer
from embedder.app.ports.request_provider import RequestProvider

T = TypeVar("T")
Factory = Callable[[Mapping[str, Any]], T]


class StrategyRegistry(Generic[T]):
    def __init__(self, kind: str, factories: Mapping[str, Factory[T]] | None = None) -> None:
        self._kind = kind
        self._factories: dict[str, Factory[T]] = dict(factories or {})

    def register(self, name: str, factory: Factory[T]) -> None:
        self._factories[name] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    def create(self, name: str, options: Mapping[str, Any] | None = None) -> T:
        factory = self._factories.get(name)
        if factory is None:
            raise OembedConfigurationError(f"unknown {self._kind}: {name}")
        try:
            return factory(dict(options or {}))
        except ValidationError as exc:
            raise OembedConfigurationError(f"invalid options for {self._kind} {name}: {exc}") from exc


def _no_options(name: str, build: Callable[[], T]) -> Factory[T]:
    def factory(options: Mapping[str, Any]) -> T:
        if options:
            raise OembedConfigurationError(f"{name} takes no options, got {sorted(options)}")
        return build()

    return factory


def default_request_providers() -> StrategyRegistry[RequestProvider]:
    return StrategyRegistry(
        "request provider",
        {
            "default": _no_options("default request provider", DefaultRequestProvider),
            "access_token": lambda options: AccessTokenRequestProvider(AccessTokenOptions(**options)),
        },
    )


def default_renderers() -> StrategyRegistry[Renderer]:
    return StrategyRegistry(
        "renderer",
        {
            "default": _no_options("default renderer", DefaultRenderer),
            "link_card": lambda options: LinkCardRenderer(LinkCardOptions(**options)),
        },
    )
