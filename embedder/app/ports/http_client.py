"""HTTP port used by autodiscovery and the fetch pipeline.

Status codes are data, not errors: the port only raises when no response was received.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol, runtime_checkable


class HttpClientError(Exception):
    """No response: connection, protocol or URL failure."""


class HttpClientTimeoutError(HttpClientError):
    pass


@runtime_checkable
class HttpResponse(Protocol):
    status_code: int
    # Final URL, after any redirects were followed.
    url: str
    content: bytes
    headers: Mapping[str, str]

    @property
    def text(self) -> str: ...


@dataclass(frozen=True)
class RequestTimeout:
    connect_seconds: float
    read_seconds: float


@runtime_checkable
class AbstractHttpClient(Protocol):
    async def get(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        follow_redirects: bool = True,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse: ...

    async def close(self) -> None: ...
