"""Endpoint configuration: validated once, turned into immutable OembedEndpoint values.

The endpoints file is a JSON list, e.g.::

    [
      {
        "name": "youtube",
        "endpoint": "https://www.youtube.com/oembed",
        "max_width": 480,
        "url_schemes": ["https?://(www\\\\.)?youtube\\\\.com/watch\\\\?v=.+"]
      }
    ]
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, TypeAdapter, ValidationError

from embedder.app.domain.endpoint import DEFAULT_STRATEGY, OembedEndpoint
from embedder.app.domain.errors import OembedConfigurationError
from embedder.app.domain.models import Format


class EndpointConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    endpoint: str = Field(min_length=1)
    format: Format = Format.json
    max_width: PositiveInt | None = None
    max_height: PositiveInt | None = None
    url_schemes: list[str] = Field(default_factory=list)
    request_provider: str = DEFAULT_STRATEGY
    request_provider_options: dict[str, Any] = Field(default_factory=dict)
    renderer: str = DEFAULT_STRATEGY
    renderer_options: dict[str, Any] = Field(default_factory=dict)

    def to_endpoint(self) -> OembedEndpoint:
        return OembedEndpoint(
            name=self.name,
            endpoint=self.endpoint,
            url_schemes=tuple(self.url_schemes),
            format=self.format,
            max_width=self.max_width,
            max_height=self.max_height,
            request_provider=self.request_provider,
            request_provider_options=self.request_provider_options,
            renderer=self.renderer,
            renderer_options=self.renderer_options,
        )


_ENDPOINT_LIST = TypeAdapter(list[EndpointConfig])


def parse_endpoints(raw: str | bytes) -> list[OembedEndpoint]:
    try:
        configs = _ENDPOINT_LIST.validate_json(raw)
    except ValidationError as exc:
        raise OembedConfigurationError(f"invalid endpoint configuration: {exc}") from exc
    return [config.to_endpoint() for config in configs]


def load_endpoints(path: str | Path | None) -> list[OembedEndpoint]:
    """Load endpoints from a JSON file; no path means no static endpoints."""
    if not path:
        return []
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise OembedConfigurationError(f"cannot read endpoints file {path}: {exc}") from exc
    return parse_endpoints(raw)
