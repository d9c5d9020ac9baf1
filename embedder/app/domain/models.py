"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Format(str, Enum):
    json = "json"
    xml = "xml"

    def __str__(self) -> str:
        return self.value


class OembedResponse(BaseModel):
    """Parsed oEmbed payload. Only `type` is mandatory; unknown fields are dropped.

    `source` and `original_url` are filled in after parsing and never serialised.
    """

    # Providers send e.g. "version": 1.0 or "width": 640.5; numbers become strings and
    # fractional sizes are truncated instead of failing the whole payload.
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    type: str
    version: str | None = None
    title: str | None = None
    author_name: str | None = None
    author_url: str | None = None
    provider_name: str | None = None
    provider_url: str | None = None
    cache_age: int | None = None
    thumbnail_url: str | None = None
    thumbnail_width: int | None = None
    thumbnail_height: int | None = None
    url: str | None = None
    html: str | None = None
    width: int | None = None
    height: int | None = None

    source: str | None = Field(default=None, exclude=True)
    original_url: str | None = Field(default=None, exclude=True)

    @field_validator("cache_age", "thumbnail_width", "thumbnail_height", "width", "height", mode="before")
    @classmethod
    def _truncate_fraction(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                return value
        elif isinstance(value, float):
            number = value
        else:
            return value
        return int(number) if math.isfinite(number) else value

    def stamped(self, *, source: str | None, original_url: str) -> "OembedResponse":
        return self.model_copy(update={"source": source, "original_url": original_url})

    def to_wire(self) -> dict[str, object]:
        """Wire fields that carry a value."""
        return self.model_dump(exclude_none=True)


@dataclass(frozen=True)
class OembedRequest:
    """Outbound request for an oEmbed API URL."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CacheEntry:
    """Cached outcome for a URL; `response is None` marks a negative entry."""

    key: str
    response: OembedResponse | None
    ttl_seconds: int

    @property
    def is_negative(self) -> bool:
        return self.response is None
