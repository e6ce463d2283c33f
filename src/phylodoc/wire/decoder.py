"""NeXML bytes -> Document.

Decoding is strict: anything that would produce a document violating its
own invariants (duplicate identifiers, dangling OTU references, malformed
trees or matrices, annotations with unbound prefixes) is rejected with
MalformedWireFormat rather than repaired.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from loguru import logger

from ..core.exceptions import DocumentError, MalformedWireFormat, NamespaceError
from ..metadata import Annotation, Literal, Resource, check_resolvable
from ..model.characters import Character, CharactersBlock, DataKind, Matrix, Row, State, StateSet
from ..model.document import Document
from ..model.otus import OTU, OTUBlock
from ..model.trees import Edge, Node, Tree, TreeBlock
from ..namespaces import NEXML_URI
from .constants import CHARACTERS_KINDS, STATE_TAGS, XSI_TYPE_PARSED

MISSING_SYMBOLS = frozenset({"?"})


def _local(tag: str) -> str:
    """Strip the ``{namespace}`` part of a parsed tag."""
    return tag.rsplit("}", 1)[-1]


def _local_type(element: ET.Element) -> str | None:
    """Get the xsi:type of an element without its prefix."""
    value = element.get(XSI_TYPE_PARSED)
    if value is None:
        return None
    return value.rsplit(":", 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def _require(element: ET.Element, attr: str) -> str:
    value = element.get(attr)
    if value is None:
        where = element.get("id") or _local(element.tag)
        raise MalformedWireFormat(f"<{_local(element.tag)}> is missing '{attr}'", where)
    return value


def _parse(data: bytes) -> tuple[ET.Element, list[tuple[str, str]]]:
    """Parse XML, collecting namespace declarations in document order."""
    parser = ET.XMLPullParser(events=("start-ns", "end"))
    try:
        parser.feed(data)
        parser.close()
    except ET.ParseError as e:
        raise MalformedWireFormat(f"not well-formed XML ({e})") from e

    bindings: list[tuple[str, str]] = []
    root = None
    for event, payload in parser.read_events():
        if event == "start-ns":
            bindings.append(payload)
        else:
            root = payload
    if root is None:
        raise MalformedWireFormat("empty input")
    return root, bindings


class _Reader:
    """Builds a Document from a parsed NeXML root."""

    def __init__(self, bindings: list[tuple[str, str]]):
        self.document = Document()
        for prefix, uri in bindings:
            if not prefix:
                continue
            try:
                self.document.namespaces.register(prefix, uri)
            except (NamespaceError, ValueError) as e:
                raise MalformedWireFormat(str(e), prefix) from e
        self._blocks: dict[tuple[DataKind, str], CharactersBlock] = {}

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _reserve(self, kind: str, element: ET.Element) -> str:
        identifier = _require(element, "id")
        if not self.document.ids.reserve(kind, identifier):
            raise MalformedWireFormat(f"duplicate {kind} id", identifier)
        return identifier

    def _meta(self, element: ET.Element) -> Annotation:
        children = [self._meta(child) for child in _children(element, "meta")]
        xsi_type = _local_type(element)

        if xsi_type == "ResourceMeta" or (xsi_type is None and "rel" in element.attrib):
            return Annotation(_require(element, "rel"), Resource(element.get("href")), children)

        prop = _require(element, "property")
        if "content" in element.attrib:
            text = element.get("content", "")
        else:
            text = element.text or ""
            if children and not text.strip():
                text = ""
        try:
            value = Literal.parse(text, element.get("datatype"))
        except ValueError as e:
            raise MalformedWireFormat(f"bad literal for {prop}: {e}", prop) from e
        return Annotation(prop, value, children)

    def _annotations(self, element: ET.Element) -> list[Annotation]:
        annotations = [self._meta(child) for child in _children(element, "meta")]
        try:
            check_resolvable(annotations, self.document.namespaces)
        except NamespaceError as e:
            raise MalformedWireFormat(str(e), element.get("id")) from e
        return annotations

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def read(self, root: ET.Element) -> Document:
        if _local(root.tag) != "nexml":
            raise MalformedWireFormat(f"unexpected root element <{_local(root.tag)}>")
        if root.tag != f"{{{NEXML_URI}}}nexml":
            logger.debug(f"Root element uses a foreign namespace: {root.tag}")

        self.document.meta = self._annotations(root)
        for child in root:
            name = _local(child.tag)
            if name == "otus":
                self.document.otus.append(self._otus(child))
            elif name == "trees":
                self.document.trees.append(self._trees(child))
            elif name == "characters":
                self._characters(child)
            elif name != "meta":
                logger.debug(f"Skipping unsupported element <{name}>")

        try:
            self.document.check_references()
        except DocumentError as e:
            raise MalformedWireFormat(str(e), getattr(e, "identifier", None)) from e
        return self.document

    def _otus(self, element: ET.Element) -> OTUBlock:
        block = OTUBlock(
            id=self._reserve("otus", element),
            label=element.get("label"),
            meta=self._annotations(element),
        )
        for otu_el in _children(element, "otu"):
            block.otus.append(
                OTU(
                    id=self._reserve("otu", otu_el),
                    label=otu_el.get("label"),
                    meta=self._annotations(otu_el),
                )
            )
        return block

    def _trees(self, element: ET.Element) -> TreeBlock:
        block = TreeBlock(
            id=self._reserve("trees", element),
            otus=element.get("otus"),
            label=element.get("label"),
            meta=self._annotations(element),
        )
        for tree_el in _children(element, "tree"):
            tree = Tree(
                id=self._reserve("tree", tree_el),
                label=tree_el.get("label"),
                meta=self._annotations(tree_el),
            )
            for node_el in _children(tree_el, "node"):
                tree.nodes.append(
                    Node(
                        id=self._reserve("node", node_el),
                        label=node_el.get("label"),
                        otu=node_el.get("otu"),
                        root=node_el.get("root", "false").strip().lower() in {"true", "1"},
                        meta=self._annotations(node_el),
                    )
                )
            for edge_el in _children(tree_el, "edge"):
                edge_id = self._reserve("edge", edge_el)
                length = edge_el.get("length")
                try:
                    parsed = float(length) if length is not None else None
                except ValueError as e:
                    raise MalformedWireFormat(f"bad edge length {length!r}", edge_id) from e
                tree.edges.append(
                    Edge(
                        id=edge_id,
                        source=_require(edge_el, "source"),
                        target=_require(edge_el, "target"),
                        length=parsed,
                        meta=self._annotations(edge_el),
                    )
                )
            try:
                tree.check_structure()
            except DocumentError as e:
                raise MalformedWireFormat(str(e), tree.id) from e
            block.trees.append(tree)
        return block

    def _characters(self, element: ET.Element) -> None:
        matrix_id = self._reserve("matrix", element)
        xsi_type = _local_type(element)
        if xsi_type not in CHARACTERS_KINDS:
            raise MalformedWireFormat(f"unsupported characters type {xsi_type!r}", matrix_id)
        kind, molecule, seqs = CHARACTERS_KINDS[xsi_type]
        otus = _require(element, "otus")

        matrix = Matrix(
            id=matrix_id,
            kind=kind,
            label=element.get("label"),
            molecule=molecule,
            meta=self._annotations(element),
        )
        for format_el in _children(element, "format"):
            for states_el in _children(format_el, "states"):
                state_set = StateSet(id=self._reserve("states", states_el))
                for state_el in states_el:
                    if _local(state_el.tag) not in STATE_TAGS:
                        continue
                    state_set.states.append(
                        State(
                            id=self._reserve("state", state_el),
                            symbol=_require(state_el, "symbol"),
                            label=state_el.get("label"),
                        )
                    )
                matrix.state_sets.append(state_set)
            for char_el in _children(format_el, "char"):
                matrix.characters.append(
                    Character(
                        id=self._reserve("char", char_el),
                        label=char_el.get("label"),
                        states=char_el.get("states"),
                        meta=self._annotations(char_el),
                    )
                )

        for matrix_el in _children(element, "matrix"):
            for row_el in _children(matrix_el, "row"):
                row = Row(
                    id=self._reserve("row", row_el),
                    otu=_require(row_el, "otu"),
                    label=row_el.get("label"),
                    meta=self._annotations(row_el),
                )
                if seqs:
                    row.cells = self._seq_cells(matrix, row_el)
                else:
                    row.cells = self._cells(matrix, row_el)
                matrix.rows.append(row)

        try:
            matrix.check_structure()
        except DocumentError as e:
            raise MalformedWireFormat(str(e), matrix.id) from e

        block = self._blocks.get((kind, otus))
        if block is None:
            block = CharactersBlock(
                id=self.document.ids.next("block"), otus=otus, kind=kind
            )
            self._blocks[(kind, otus)] = block
            self.document.characters.append(block)
        block.matrices.append(matrix)

    # -------------------------------------------------------------------------
    # Cells
    # -------------------------------------------------------------------------

    def _cells(self, matrix: Matrix, row_el: ET.Element) -> dict[str, object]:
        states = {
            char.id: matrix.get_state_set(char.states) for char in matrix.characters
        }
        cells: dict[str, object] = {}
        for cell_el in _children(row_el, "cell"):
            char_id = _require(cell_el, "char")
            state = _require(cell_el, "state")
            if char_id not in states:
                raise MalformedWireFormat(f"cell for unknown character '{char_id}'", row_el.get("id"))
            if char_id in cells:
                raise MalformedWireFormat(f"two cells for character '{char_id}'", row_el.get("id"))
            if matrix.kind is DataKind.CONTINUOUS:
                try:
                    cells[char_id] = float(state)
                except ValueError as e:
                    raise MalformedWireFormat(f"bad continuous value {state!r}", row_el.get("id")) from e
                continue
            state_set = states[char_id]
            found = state_set.by_id().get(state) if state_set is not None else None
            if found is None:
                raise MalformedWireFormat(f"unknown state '{state}'", row_el.get("id"))
            cells[char_id] = found.value
        return cells

    def _seq_cells(self, matrix: Matrix, row_el: ET.Element) -> dict[str, object]:
        row_id = row_el.get("id")
        text = "".join((seq.text or "") for seq in _children(row_el, "seq"))
        if matrix.kind is DataKind.MOLECULAR:
            tokens = [ch for ch in text if not ch.isspace()]
        else:
            tokens = text.split()
        if len(tokens) > len(matrix.characters):
            raise MalformedWireFormat("sequence is longer than the character list", row_id)

        cells: dict[str, object] = {}
        for char, token in zip(matrix.characters, tokens):
            if token in MISSING_SYMBOLS:
                continue
            if matrix.kind is DataKind.CONTINUOUS:
                try:
                    cells[char.id] = float(token)
                except ValueError as e:
                    raise MalformedWireFormat(f"bad continuous value {token!r}", row_id) from e
                continue
            state_set = matrix.get_state_set(char.states)
            by_symbol = {s.symbol: s for s in state_set.states} if state_set is not None else {}
            if token not in by_symbol:
                raise MalformedWireFormat(f"unknown symbol '{token}'", row_id)
            cells[char.id] = by_symbol[token].value
        return cells


def decode(data: bytes | str) -> Document:
    """Parse NeXML into a Document.

    Raises:
        MalformedWireFormat: If the input is not well-formed XML or cannot
            be decoded into a structurally valid document.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    root, bindings = _parse(data)
    document = _Reader(bindings).read(root)
    logger.debug(
        f"Decoded document: {len(document.otus)} OTU blocks, "
        f"{len(document.trees)} tree blocks, {len(document.characters)} characters blocks"
    )
    return document


def read(path: Path | str) -> Document:
    """Read and decode a NeXML file."""
    return decode(Path(path).read_bytes())
