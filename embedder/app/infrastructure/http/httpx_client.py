"""httpx implementation of the HTTP port.

Bodies are read eagerly: oEmbed payloads and the HTML heads scanned during autodiscovery
are small, and callers never stream.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

import httpx
from loguru import logger

from embedder.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    HttpResponse,
    RequestTimeout,
)


@dataclass(frozen=True)
class FetchedResponse:
    """Snapshot of an httpx.Response satisfying HttpResponse."""

    status_code: int
    url: str
    content: bytes
    encoding: str = "utf-8"
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def of(cls, response: httpx.Response) -> "FetchedResponse":
        return cls(
            status_code=response.status_code,
            url=str(response.url),
            content=response.content,
            encoding=response.encoding or "utf-8",
            headers=dict(response.headers),
        )

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding, errors="replace")


def to_httpx_timeout(timeout: RequestTimeout) -> httpx.Timeout:
    # write and pool follow read and connect; the requests carry no body
    return httpx.Timeout(
        connect=timeout.connect_seconds,
        read=timeout.read_seconds,
        write=timeout.read_seconds,
        pool=timeout.connect_seconds,
    )


class HttpxHttpClient(AbstractHttpClient):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def get(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        follow_redirects: bool = True,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        try:
            response = await self._client.get(
                url,
                timeout=to_httpx_timeout(timeout),
                follow_redirects=follow_redirects,
                headers=headers or {},
            )
        except httpx.TimeoutException as exc:
            raise HttpClientTimeoutError(f"timed out fetching {url}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise HttpClientError(f"cannot fetch {url}: {exc}") from exc

        logger.debug("GET {} -> {} ({} bytes, final url {})", url, response.status_code, len(response.content), response.url)
        return FetchedResponse.of(response)

    async def close(self) -> None:
        await self._client.aclose()
