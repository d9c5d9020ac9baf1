"""XML oEmbed parser.

Documents have an `<oembed>` root whose child elements carry the wire fields, e.g.
`<oembed><type>photo</type><width>240</width></oembed>`. CDATA sections are plain text
to ElementTree.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET

from pydantic import ValidationError

from embedder.app.domain.errors import OembedParseError
from embedder.app.domain.models import OembedResponse

ROOT_ELEMENT = "oembed"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class OembedXmlParser:
    def unmarshal(self, content: bytes) -> OembedResponse:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise OembedParseError(f"invalid oembed xml: {exc}") from exc
        if _local_name(root.tag) != ROOT_ELEMENT:
            raise OembedParseError(f"invalid oembed xml: unexpected root element <{root.tag}>")

        fields: dict[str, str] = {}
        for child in root:
            if not isinstance(child.tag, str):
                continue
            text = (child.text or "").strip()
            if text:
                fields.setdefault(_local_name(child.tag), text)
        try:
            return OembedResponse.model_validate(fields)
        except ValidationError as exc:
            raise OembedParseError(f"invalid oembed xml: {exc.error_count()} error(s): {exc.errors()[0]['msg']}") from exc

    def marshal(self, response: OembedResponse) -> bytes:
        root = ET.Element(ROOT_ELEMENT)
        for name, value in response.to_wire().items():
            ET.SubElement(root, name).text = str(value)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)
