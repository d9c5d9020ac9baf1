"""JSON oEmbed parser backed by pydantic validation."""
from __future__ import annotations

from pydantic import ValidationError

from embedder.app.domain.errors import OembedParseError
from embedder.app.domain.models import OembedResponse


class OembedJsonParser:
    def unmarshal(self, content: bytes) -> OembedResponse:
        try:
            return OembedResponse.model_validate_json(content)
        except ValidationError as exc:
            raise OembedParseError(f"invalid oembed json: {exc.error_count()} error(s): {exc.errors()[0]['msg']}") from exc

    def marshal(self, response: OembedResponse) -> bytes:
        return response.model_dump_json(exclude_none=True).encode("utf-8")
