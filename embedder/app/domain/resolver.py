"""Endpoint resolution: first configured endpoint whose pattern matches wins."""
from __future__ import annotations

from typing import Iterable

from loguru import logger

from embedder.app.domain.autodiscovery import AutodiscoveryProbe
from embedder.app.domain.endpoint import OembedEndpoint
from embedder.app.domain.errors import OembedConfigurationError


class EndpointResolver:
    def __init__(
        self,
        endpoints: Iterable[OembedEndpoint],
        probe: AutodiscoveryProbe | None = None,
        *,
        autodiscovery: bool = False,
    ) -> None:
        self._endpoints = tuple(endpoints)
        names = [e.name for e in self._endpoints]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise OembedConfigurationError(f"duplicate endpoint names: {duplicates}")
        if autodiscovery and probe is None:
            raise OembedConfigurationError("autodiscovery requires a probe")
        self._probe = probe
        self._autodiscovery = autodiscovery
        for endpoint in self._endpoints:
            logger.debug("Endpoint {} will match the following patterns: {}", endpoint.name, endpoint.url_schemes)

    @property
    def endpoints(self) -> tuple[OembedEndpoint, ...]:
        return self._endpoints

    @property
    def autodiscovery(self) -> bool:
        return self._autodiscovery

    def find_static(self, url: str) -> OembedEndpoint | None:
        for endpoint in self._endpoints:
            if endpoint.matches(url):
                return endpoint
        return None

    async def resolve(self, url: str) -> OembedEndpoint | None:
        endpoint = self.find_static(url)
        if endpoint is None and self._autodiscovery and self._probe is not None:
            endpoint = await self._probe.probe(url)
        return endpoint
