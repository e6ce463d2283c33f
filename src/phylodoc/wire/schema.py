"""Local structural check of NeXML, used when the remote validator is unavailable.

This is not a full XML Schema validation. It checks the parts of the
NeXML content model the decoder depends on and collects every problem
instead of stopping at the first one.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from ..core.exceptions import MalformedWireFormat
from ..namespaces import NEXML_URI
from .constants import XSI_TYPE_PARSED
from .decoder import decode

BLOCK_ORDER = {"meta": 0, "otus": 1, "characters": 2, "trees": 3}

# Attributes each element must carry
REQUIRED: dict[str, tuple[str, ...]] = {
    "otus": ("id",),
    "otu": ("id",),
    "trees": ("id", "otus"),
    "tree": ("id",),
    "node": ("id",),
    "edge": ("id", "source", "target"),
    "characters": ("id", "otus", XSI_TYPE_PARSED),
    "states": ("id",),
    "state": ("id", "symbol"),
    "char": ("id",),
    "row": ("id", "otu"),
    "cell": ("char", "state"),
    "meta": (XSI_TYPE_PARSED,),
}


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _attr_name(attr: str) -> str:
    return "xsi:type" if attr == XSI_TYPE_PARSED else attr


def check_structure(data: bytes) -> list[str]:
    """Check NeXML bytes and return a list of problems (empty when valid)."""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        return [f"Not well-formed XML: {e}"]

    messages: list[str] = []
    if root.tag != f"{{{NEXML_URI}}}nexml":
        messages.append(f"Root element must be nexml in {NEXML_URI}, got {root.tag}")
    if "version" not in root.attrib:
        messages.append("Root element is missing 'version'")

    position = 0
    for child in root:
        name = _local(child.tag)
        rank = BLOCK_ORDER.get(name)
        if rank is None:
            messages.append(f"Unexpected element <{name}> under root")
            continue
        if rank < position:
            messages.append(f"<{name}> {child.get('id')} is out of order")
        position = max(position, rank)

    seen: set[str] = set()
    for element in root.iter():
        name = _local(element.tag)
        for attr in REQUIRED.get(name, ()):
            if attr not in element.attrib:
                where = element.get("id")
                suffix = f" ({where})" if where else ""
                messages.append(f"<{name}>{suffix} is missing '{_attr_name(attr)}'")
        if name == "meta" and not ({"property", "rel"} & set(element.attrib)):
            messages.append("<meta> needs 'property' or 'rel'")
        identifier = element.get("id")
        if identifier is not None:
            if identifier in seen:
                messages.append(f"Duplicate id '{identifier}'")
            seen.add(identifier)

    if not messages:
        try:
            decode(data)
        except MalformedWireFormat as e:
            messages.append(str(e))
    return messages
