"""Decode backend XML documents into plain nested dictionaries.

The root element name is dropped and its content becomes the top-level dict:

* attributes become string entries,
* child elements become entries keyed by tag, repeated tags become lists
  in document order,
* a child without attributes or children becomes its stripped text, or an
  empty dict when it has no text at all,
* text mixed with attributes or children is kept under ``_content``.

A missing key means the element or attribute was absent; an empty value
(``""`` or ``{}``) means it was present but empty.
"""

import xml.etree.ElementTree as ET
from typing import Any

from transport.errors import XmlDecodeError

CONTENT_KEY = "_content"

XmlHash = dict[str, Any]


def _merge(target: XmlHash, key: str, value: Any) -> None:
    if key not in target:
        target[key] = value
        return

    existing = target[key]
    if isinstance(existing, list):
        existing.append(value)
    else:
        target[key] = [existing, value]


def _decode_element(element: ET.Element, force_hash: bool = False) -> Any:
    text = (element.text or "").strip()
    children = list(element)

    if not element.attrib and not children and not force_hash:
        return text if text else {}

    decoded: XmlHash = dict(element.attrib)
    for child in children:
        _merge(decoded, child.tag, _decode_element(child))
    if text:
        decoded[CONTENT_KEY] = text
    return decoded


def parse(xml: str | bytes) -> XmlHash:
    if xml is None or not xml.strip():
        raise XmlDecodeError("empty XML document")

    try:
        root = ET.fromstring(xml)
    except ET.ParseError as exc:
        raise XmlDecodeError(f"invalid XML document: {exc}") from exc

    return _decode_element(root, force_hash=True)


def fetch(xml_hash: XmlHash | None, key: str, default: Any = None) -> Any:
    if not xml_hash:
        return default
    return xml_hash.get(key, default)
