"""Document -> NeXML bytes.

The root element declares every namespace binding of the document. Blocks
follow in the order the NeXML content model requires (all OTU blocks, then
characters, then tree blocks), each kind in the order it was added. Each
characters block contributes one ``<characters>`` element per matrix.
Annotations become ``<meta>`` children of the element they annotate:
literals carry the value as element text plus a ``datatype`` (or in a
``content`` attribute when element text would not survive parsing),
resources an ``href``; nested annotations are nested ``<meta>`` elements.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from loguru import logger

from ..core.config import WriterConfig
from ..metadata import Annotation, Literal
from ..model.characters import DataKind, Matrix
from ..model.document import Document
from ..model.otus import OTUBlock
from ..model.trees import TreeBlock
from ..namespaces import NEXML_URI
from .constants import (
    CELLS_TYPES,
    FLOAT_TREE,
    LITERAL_META,
    RESOURCE_META,
    ROOT_TAG,
    XSI_TYPE,
)


def _element(tag: str, **attrs: str | None) -> ET.Element:
    """Create an element, dropping attributes whose value is None."""
    return ET.Element(tag, {key: value for key, value in attrs.items() if value is not None})


def _meta_element(annotation: Annotation) -> ET.Element:
    if isinstance(annotation.value, Literal):
        element = _element(
            "meta",
            **{XSI_TYPE: LITERAL_META},
            property=annotation.property,
            datatype=annotation.value.datatype,
        )
        text = annotation.value.lexical()
        # Parsers normalise \r in element text, and indentation replaces
        # whitespace-only text before nested meta; attributes keep both
        if "\r" in text or (annotation.children and text and not text.strip()):
            element.set("content", text)
        else:
            element.text = text
    else:
        element = _element(
            "meta",
            **{XSI_TYPE: RESOURCE_META},
            rel=annotation.property,
            href=annotation.value.href,
        )
    for child in annotation.children:
        element.append(_meta_element(child))
    return element


def _append_meta(parent: ET.Element, annotations: list[Annotation]) -> None:
    for annotation in annotations:
        parent.append(_meta_element(annotation))


def _otus_element(block: OTUBlock) -> ET.Element:
    element = _element("otus", id=block.id, label=block.label)
    _append_meta(element, block.meta)
    for otu in block.otus:
        child = _element("otu", id=otu.id, label=otu.label)
        _append_meta(child, otu.meta)
        element.append(child)
    return element


def _trees_element(block: TreeBlock) -> ET.Element:
    element = _element("trees", id=block.id, otus=block.otus, label=block.label)
    _append_meta(element, block.meta)
    for tree in block.trees:
        tree_el = _element("tree", id=tree.id, label=tree.label, **{XSI_TYPE: FLOAT_TREE})
        _append_meta(tree_el, tree.meta)
        for node in tree.nodes:
            node_el = _element(
                "node",
                id=node.id,
                label=node.label,
                otu=node.otu,
                root="true" if node.root else None,
            )
            _append_meta(node_el, node.meta)
            tree_el.append(node_el)
        for edge in tree.edges:
            edge_el = _element(
                "edge",
                id=edge.id,
                source=edge.source,
                target=edge.target,
                length=repr(edge.length) if edge.length is not None else None,
            )
            _append_meta(edge_el, edge.meta)
            tree_el.append(edge_el)
        element.append(tree_el)
    return element


def _characters_element(matrix: Matrix, otus: str) -> ET.Element:
    element = _element(
        "characters",
        id=matrix.id,
        otus=otus,
        label=matrix.label,
        **{XSI_TYPE: CELLS_TYPES[(matrix.kind, matrix.molecule)]},
    )
    _append_meta(element, matrix.meta)

    format_el = ET.SubElement(element, "format")
    for state_set in matrix.state_sets:
        states_el = _element("states", id=state_set.id)
        for state in state_set.states:
            states_el.append(_element("state", id=state.id, symbol=state.symbol, label=state.label))
        format_el.append(states_el)
    for char in matrix.characters:
        char_el = _element("char", id=char.id, label=char.label, states=char.states)
        _append_meta(char_el, char.meta)
        format_el.append(char_el)

    state_ids: dict[str, dict[str, str]] = {}
    for char in matrix.characters:
        state_set = matrix.get_state_set(char.states)
        if state_set is not None:
            state_ids[char.id] = {value: state.id for value, state in state_set.by_value().items()}

    matrix_el = ET.SubElement(element, "matrix")
    for row in matrix.rows:
        row_el = _element("row", id=row.id, otu=row.otu, label=row.label)
        _append_meta(row_el, row.meta)
        for char in matrix.characters:
            if char.id not in row.cells:
                continue
            value = row.cells[char.id]
            if matrix.kind is DataKind.CONTINUOUS:
                state = repr(float(value))
            else:
                state = state_ids[char.id][value]
            row_el.append(_element("cell", char=char.id, state=state))
        matrix_el.append(row_el)
    return element


def build_tree(document: Document, config: WriterConfig | None = None) -> ET.ElementTree:
    """Build the ElementTree for a document."""
    config = config or WriterConfig()
    attrs = {"version": config.version, "generator": config.generator, "xmlns": NEXML_URI}
    for prefix, uri in document.namespaces.snapshot().items():
        attrs[f"xmlns:{prefix}"] = uri
    root = ET.Element(ROOT_TAG, attrs)

    _append_meta(root, document.meta)
    for otus in document.otus:
        root.append(_otus_element(otus))
    for block in document.characters:
        for matrix in block.matrices:
            root.append(_characters_element(matrix, block.otus))
    for trees in document.trees:
        root.append(_trees_element(trees))

    tree = ET.ElementTree(root)
    if config.pretty:
        ET.indent(tree)
    return tree


def encode(document: Document, config: WriterConfig | None = None) -> bytes:
    """Serialize a document to NeXML bytes (UTF-8, with XML declaration)."""
    root = build_tree(document, config).getroot()
    data = ET.tostring(root, encoding="utf-8", xml_declaration=True)
    logger.debug(f"Encoded document: {len(data)} bytes")
    return data


def write(document: Document, path: Path | str, config: WriterConfig | None = None) -> Path:
    """Encode a document and write it to ``path``."""
    path = Path(path)
    path.write_bytes(encode(document, config))
    logger.debug(f"Wrote document to {path}")
    return path
