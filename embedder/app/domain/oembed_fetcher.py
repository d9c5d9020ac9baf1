"""Fetch/parse pipeline: endpoint + URL -> parsed oEmbed response.

Uses the HTTP port; the client is built in the composition root. Anything the remote
side gets wrong (status, transport, body) ends as None. A broken endpoint template is
a configuration error and is raised.
"""
from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from embedder.app.core import SERVICE_NAME
from embedder.app.domain.endpoint import OembedEndpoint
from embedder.app.domain.errors import OembedConfigurationError, OembedParseError
from embedder.app.domain.models import Format, OembedResponse
from embedder.app.domain.request_providers import DefaultRequestProvider
from embedder.app.ports.http_client import AbstractHttpClient, HttpClientError, RequestTimeout
from embedder.app.ports.oembed_parser import OembedParser
from embedder.app.ports.request_provider import RequestProvider


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


class OembedFetcher:
    def __init__(
        self,
        client: AbstractHttpClient,
        parsers: Mapping[Format, OembedParser],
        timeout: RequestTimeout,
        *,
        user_agent: str,
        application_name: str | None = None,
        request_providers: Mapping[str, RequestProvider] | None = None,
    ) -> None:
        self._client = client
        self._parsers = dict(parsers)
        self._timeout = timeout
        self._user_agent = user_agent
        self._application_name = application_name or None
        self._request_providers = dict(request_providers or {})
        self._default_request_provider = DefaultRequestProvider()

    def parser_for(self, fmt: Format) -> OembedParser:
        parser = self._parsers.get(fmt)
        if parser is None:
            raise OembedConfigurationError(f"no parser registered for format {fmt}")
        return parser

    def request_provider_for(self, endpoint: OembedEndpoint) -> RequestProvider:
        return self._request_providers.get(endpoint.name, self._default_request_provider)

    async def fetch(self, endpoint: OembedEndpoint, url: str) -> OembedResponse | None:
        api_url = endpoint.to_api_url(url)
        parser = self.parser_for(endpoint.format)
        request = self.request_provider_for(endpoint).create_request_for(
            self._user_agent, self._application_name, api_url
        )

        try:
            response = await self._client.get(
                request.url,
                timeout=self._timeout,
                follow_redirects=True,
                headers=request.headers or None,
            )
        except HttpClientError as exc:
            _log("oembed_fetch_failed", url=url, api_url=request.url, error=str(exc))
            return None

        if response.status_code != 200:
            _log("oembed_fetch_failed", url=url, api_url=request.url, status_code=response.status_code)
            return None

        try:
            parsed = parser.unmarshal(response.content)
        except OembedParseError as exc:
            _log("oembed_parse_failed", url=url, api_url=request.url, error=str(exc))
            return None

        return parsed.stamped(source=endpoint.name, original_url=url)
