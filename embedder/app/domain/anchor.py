"""Read-only snapshot of an anchor element handed to renderers."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from bs4 import Tag


@dataclass(frozen=True)
class AnchorView:
    href: str
    abs_href: str
    text: str
    attrs: Mapping[str, str]
    markup: str

    @classmethod
    def of(cls, tag: Tag, abs_href: str) -> "AnchorView":
        attrs = {
            name: " ".join(value) if isinstance(value, list) else str(value)
            for name, value in tag.attrs.items()
        }
        return cls(
            href=attrs.get("href", ""),
            abs_href=abs_href,
            text=tag.get_text(),
            attrs=MappingProxyType(attrs),
            markup=str(tag),
        )
