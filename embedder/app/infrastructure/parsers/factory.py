"""Parser factory: one parser per supported wire format."""
from __future__ import annotations

from embedder.app.domain.models import Format
from embedder.app.infrastructure.parsers.json_parser import OembedJsonParser
from embedder.app.infrastructure.parsers.xml_parser import OembedXmlParser
from embedder.app.ports.oembed_parser import OembedParser


def create_parsers() -> dict[Format, OembedParser]:
    return {
        Format.json: OembedJsonParser(),
        Format.xml: OembedXmlParser(),
    }
