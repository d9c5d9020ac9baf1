"""Renderers turning oEmbed responses into markup."""
from __future__ import annotations

from html import escape

from pydantic import BaseModel, ConfigDict

from embedder.app.domain.anchor import AnchorView
from embedder.app.domain.models import OembedResponse


def _attr(value: object) -> str:
    return escape(str(value), quote=True)


class DefaultRenderer:
    """photo -> <img>, video/rich -> provider html, link -> <a>. Other types render nothing."""

    def render(self, response: OembedResponse, anchor: AnchorView) -> str | None:
        kind = (response.type or "").lower()
        if kind == "photo":
            title = _attr(response.title or "")
            return (
                f'<img src="{_attr(response.url or "")}" '
                f'style="{_size_style(response.width, response.height)}" '
                f'alt="{title}" title="{title}"/>'
            )
        if kind in ("video", "rich"):
            return response.html
        if kind == "link":
            original_url = anchor.abs_href
            url = response.url if response.url is not None else original_url
            title = response.title if response.title is not None else original_url
            return f'<a href="{_attr(url)}">{escape(title, quote=False)}</a>'
        return None


def _size_style(width: int | None, height: int | None) -> str:
    parts = []
    if width is not None:
        parts.append(f"width:{width}px;")
    if height is not None:
        parts.append(f"height:{height}px;")
    return " ".join(parts)


class LinkCardOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    css_class: str = "oembed-card"
    show_thumbnail: bool = True
    open_in_new_tab: bool = True


class LinkCardRenderer:
    """Renders any response as a compact card: thumbnail, title and provider."""

    def __init__(self, options: LinkCardOptions | None = None) -> None:
        self._options = options or LinkCardOptions()

    def render(self, response: OembedResponse, anchor: AnchorView) -> str | None:
        css = self._options.css_class
        href = response.url if (response.type or "").lower() == "link" and response.url else anchor.abs_href
        title = response.title or anchor.text.strip() or href
        target = ' target="_blank" rel="noopener noreferrer"' if self._options.open_in_new_tab else ""

        thumbnail = ""
        if self._options.show_thumbnail and response.thumbnail_url:
            size = ""
            if response.thumbnail_width is not None and response.thumbnail_height is not None:
                size = f' width="{response.thumbnail_width}" height="{response.thumbnail_height}"'
            thumbnail = f'<img class="{_attr(css)}-thumbnail" src="{_attr(response.thumbnail_url)}" alt=""{size}/>'

        provider = ""
        if response.provider_name:
            provider = f'<span class="{_attr(css)}-provider">{escape(response.provider_name, quote=False)}</span>'

        return (
            f'<a class="{_attr(css)}" href="{_attr(href)}"{target}>'
            f"{thumbnail}"
            f'<span class="{_attr(css)}-title">{escape(title, quote=False)}</span>'
            f"{provider}"
            f"</a>"
        )
