"""Endpoint descriptors: how a consumer URL maps onto a provider API URL."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import urlencode, urlsplit

from embedder.app.domain.errors import OembedConfigurationError
from embedder.app.domain.models import Format

FORMAT_TOKEN = "%{format}"
_FORMAT_TOKEN_RE = re.compile(re.escape(FORMAT_TOKEN), re.IGNORECASE)

DEFAULT_STRATEGY = "default"


def _frozen_mapping(value: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class OembedEndpoint:
    """A statically configured endpoint.

    `url_schemes` are trimmed and compiled once; a URL matches when any of them
    matches the whole URL.
    """

    name: str
    endpoint: str
    url_schemes: tuple[str, ...] = ()
    format: Format = Format.json
    max_width: int | None = None
    max_height: int | None = None
    request_provider: str = DEFAULT_STRATEGY
    request_provider_options: Mapping[str, Any] = field(default_factory=dict)
    renderer: str = DEFAULT_STRATEGY
    renderer_options: Mapping[str, Any] = field(default_factory=dict)
    _patterns: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        schemes = tuple(s.strip() for s in self.url_schemes)
        try:
            patterns = tuple(re.compile(s) for s in schemes)
        except re.error as exc:
            raise OembedConfigurationError(f"invalid url scheme for endpoint {self.name}: {exc}") from exc
        object.__setattr__(self, "url_schemes", schemes)
        object.__setattr__(self, "format", Format(self.format))
        object.__setattr__(self, "request_provider_options", _frozen_mapping(self.request_provider_options))
        object.__setattr__(self, "renderer_options", _frozen_mapping(self.renderer_options))
        object.__setattr__(self, "_patterns", patterns)

    def __hash__(self) -> int:
        return hash(self.name)

    def matches(self, url: str) -> bool:
        return any(p.fullmatch(url) for p in self._patterns)

    def to_api_url(self, url: str) -> str:
        """Build the provider API URL for `url`.

        A template containing `%{format}` gets the format substituted and no `format`
        parameter; otherwise `format` leads the query. `maxwidth`/`maxheight` are only
        appended when configured.
        """
        template = self.endpoint or ""
        query: list[tuple[str, str]] = []
        if FORMAT_TOKEN in template.lower():
            base = _FORMAT_TOKEN_RE.sub(str(self.format), template)
        else:
            base = template
            query.append(("format", str(self.format)))
        query.append(("url", url))
        if self.max_width is not None:
            query.append(("maxwidth", str(self.max_width)))
        if self.max_height is not None:
            query.append(("maxheight", str(self.max_height)))

        _validate_base_url(base)
        separator = "&" if urlsplit(base).query else "?"
        return f"{base}{separator}{urlencode(query)}"


class AutodiscoveredEndpoint(OembedEndpoint):
    """Endpoint synthesised from a page's `<link rel="alternate">` declaration.

    Its API URL is fixed: it already names the resource it was discovered for.
    """

    def __init__(self, api_url: str, format: Format) -> None:
        super().__init__(name=f"autodiscovered:{api_url}", endpoint=api_url, format=format)

    @property
    def api_url(self) -> str:
        return self.endpoint

    def to_api_url(self, url: str) -> str:
        return self.endpoint


def _validate_base_url(base: str) -> None:
    try:
        parts = urlsplit(base)
    except ValueError as exc:
        raise OembedConfigurationError(f"invalid endpoint url {base!r}: {exc}") from exc
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        raise OembedConfigurationError(f"invalid endpoint url {base!r}")
