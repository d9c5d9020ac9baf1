"""Rewrites anchors in HTML into rendered oEmbed markup.

Anchors are handled one at a time in document order. An anchor is only replaced when
its URL yields a response and the selected renderer returns non-blank markup; in every
other case it is left exactly as it was.
"""
from __future__ import annotations

from typing import Any, Sequence, TypeVar
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag
from loguru import logger

from embedder.app.application.oembed_service import OembedService
from embedder.app.core import SERVICE_NAME
from embedder.app.domain.anchor import AnchorView
from embedder.app.domain.endpoint import OembedEndpoint
from embedder.app.domain.errors import OembedConfigurationError
from embedder.app.domain.models import OembedResponse
from embedder.app.domain.renderers import DefaultRenderer
from embedder.app.ports.renderer import Renderer

T = TypeVar("T", str, BeautifulSoup)


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def absolute_href(tag: Tag, base_url: str | None) -> str:
    """Absolute URL of the anchor's href; "" when missing or not resolvable."""
    href = tag.get("href")
    if not href:
        return ""
    href = str(href).strip()
    try:
        resolved = urljoin(base_url, href) if base_url else href
        parts = urlsplit(resolved)
    except ValueError:
        return ""
    if not parts.scheme or not (parts.netloc or parts.path):
        return ""
    return resolved


class DocumentRewriter:
    def __init__(
        self,
        service: OembedService,
        renderers: Sequence[tuple[OembedEndpoint, Renderer]] = (),
        *,
        default_renderer: Renderer | None = None,
    ) -> None:
        self._service = service
        self._renderers = tuple(renderers)
        self._default_renderer = default_renderer or DefaultRenderer()

    def renderer_for(self, url: str) -> Renderer:
        for endpoint, renderer in self._renderers:
            if endpoint.matches(url):
                return renderer
        return self._default_renderer

    def _render(self, url: str, response: OembedResponse, anchor: AnchorView) -> str | None:
        renderer = self.renderer_for(url)
        try:
            html = renderer.render(response, anchor)
        except Exception as exc:
            _log("renderer_failed", url=url, renderer=type(renderer).__name__, error=str(exc))
            return None
        if not html or not html.strip():
            return None
        return html

    async def embed_document(self, document: BeautifulSoup, base_url: str | None = None) -> BeautifulSoup:
        """Replace embeddable anchors in place and return the same document."""
        for a in document.find_all("a"):
            if a.decomposed:
                continue
            url = absolute_href(a, base_url)
            response = await self._service.get_oembed_response_for(url)
            if response is None:
                continue
            html = self._render(url, response, AnchorView.of(a, url))
            if html is None:
                continue
            fragment = BeautifulSoup(html, "html.parser")
            for node in list(fragment.contents):
                a.insert_before(node.extract())
            a.decompose()
        return document

    async def embed_urls(
        self,
        text: str | None,
        base_url: str | None = None,
        target: type[T] = str,
    ) -> T | None:
        """Rewrite an HTML fragment, returning text or a parsed document per `target`."""
        if target is str:
            if text is None or not text.strip():
                return text
        elif target is BeautifulSoup:
            if text is None or not text.strip():
                return BeautifulSoup("", "html.parser")
        else:
            raise OembedConfigurationError(f"Invalid target type: {getattr(target, '__name__', target)}")

        document = await self.embed_document(BeautifulSoup(text, "html.parser"), base_url)
        if target is BeautifulSoup:
            return document
        return str(document).strip()
