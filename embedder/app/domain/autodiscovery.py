"""Autodiscovery: find an oEmbed endpoint declared by the page itself.

Pages announce endpoints with
`<link rel="alternate" type="application/json+oembed" href="...">` (or
`text/xml+oembed`). The first declaration in document order wins.
"""
from __future__ import annotations

from typing import Any
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag
from loguru import logger

from embedder.app.core import SERVICE_NAME
from embedder.app.domain.endpoint import AutodiscoveredEndpoint
from embedder.app.domain.models import Format
from embedder.app.ports.http_client import AbstractHttpClient, HttpClientError, RequestTimeout

OEMBED_TYPES: dict[str, Format] = {
    "application/json+oembed": Format.json,
    "text/xml+oembed": Format.xml,
}


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def _is_alternate(tag: Tag) -> bool:
    rel = tag.get("rel")
    if rel is None:
        return False
    tokens = rel if isinstance(rel, list) else str(rel).split()
    return any(token.lower() == "alternate" for token in tokens)


def _absolute(base_url: str, href: str) -> str | None:
    try:
        resolved = urljoin(base_url, href.strip())
        parts = urlsplit(resolved)
    except ValueError:
        return None
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        return None
    return resolved


def find_declared_endpoint(markup: str, base_url: str) -> AutodiscoveredEndpoint | None:
    """Scan markup for the first usable oEmbed alternate link."""
    soup = BeautifulSoup(markup, "html.parser")
    base_tag = soup.find("base", href=True)
    if base_tag is not None:
        base_url = urljoin(base_url, str(base_tag["href"]))

    for alternate in soup.find_all(_is_alternate):
        fmt = OEMBED_TYPES.get(str(alternate.get("type", "")).strip().lower())
        if fmt is None:
            continue
        href = alternate.get("href")
        api_url = _absolute(base_url, str(href)) if href else None
        if api_url is None:
            continue
        return AutodiscoveredEndpoint(api_url, fmt)
    return None


class AutodiscoveryProbe:
    """GETs the page behind a URL and reads its declared oEmbed endpoint.

    Never raises for remote failures: non-200 answers and transport errors are
    logged and reported as "no endpoint".
    """

    def __init__(
        self,
        client: AbstractHttpClient,
        timeout: RequestTimeout,
        *,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._default_headers = dict(default_headers) if default_headers else {}

    async def probe(self, url: str) -> AutodiscoveredEndpoint | None:
        try:
            response = await self._client.get(
                url,
                timeout=self._timeout,
                follow_redirects=True,
                headers=self._default_headers or None,
            )
        except HttpClientError as exc:
            _log("autodiscovery_failed", url=url, error=str(exc))
            return None

        if response.status_code != 200:
            _log("autodiscovery_failed", url=url, status_code=response.status_code)
            return None

        endpoint = find_declared_endpoint(response.text, response.url or url)
        logger.debug("Autodiscovery for '{}' found {}", url, endpoint)
        return endpoint
