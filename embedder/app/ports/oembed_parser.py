"""Port: oEmbed payload (de)serialisation for one wire format."""
from __future__ import annotations

from typing import Protocol

from embedder.app.domain.models import OembedResponse


class OembedParser(Protocol):
    def unmarshal(self, content: bytes) -> OembedResponse:
        """Parse a response body; raise OembedParseError when it is not valid oEmbed."""
        ...

    def marshal(self, response: OembedResponse) -> bytes: ...
