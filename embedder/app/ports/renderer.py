"""Port: turns an oEmbed response into markup replacing an anchor."""
from __future__ import annotations

from typing import Protocol

from embedder.app.domain.anchor import AnchorView
from embedder.app.domain.models import OembedResponse


class Renderer(Protocol):
    def render(self, response: OembedResponse, anchor: AnchorView) -> str | None:
        """Return markup, or None/blank to leave the anchor as it is."""
        ...
