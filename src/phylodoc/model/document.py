"""The document: OTU, tree and characters blocks plus root annotations.

Identifiers are allocated per entity kind with a kind-specific prefix
(``os1`` for an OTU block, ``ou1`` for an OTU, ``tr1`` for a tree and so
on), so generated ids never collide within a kind or across kinds.

Entities are addressed by *level*, a path naming an entity kind as it is
nested in the wire format (``"otus/otu"``, ``"trees/tree/node"``, ...).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterator

from ..core.exceptions import DanglingReference, InvalidStructure, UnknownLevel
from ..metadata import Annotatable, Annotation
from ..namespaces import NamespaceRegistry
from .characters import CharactersBlock, Matrix
from .otus import OTUBlock
from .trees import Tree, TreeBlock


ROOT_ID = "document"

ID_PREFIXES: dict[str, str] = {
    "otus": "os",
    "otu": "ou",
    "trees": "ts",
    "tree": "tr",
    "node": "nd",
    "edge": "ed",
    "block": "cb",
    "matrix": "cs",
    "char": "cr",
    "row": "rw",
    "states": "ss",
    "state": "st",
}

LEVELS: tuple[str, ...] = (
    "document",
    "otus",
    "otus/otu",
    "trees",
    "trees/tree",
    "trees/tree/node",
    "trees/tree/edge",
    "characters",
    "characters/format/char",
    "characters/matrix/row",
)

LEVEL_ALIASES: dict[str, str] = {"nexml": "document"}


def normalize_level(level: str) -> str:
    """Map a level name or alias to its canonical form.

    Raises:
        UnknownLevel: If the level is not known.
    """
    level = LEVEL_ALIASES.get(level.strip("/"), level.strip("/"))
    if level not in LEVELS:
        raise UnknownLevel(level, list(LEVELS))
    return level


class IdAllocator:
    """Hands out identifiers unique within each entity kind."""

    def __init__(self) -> None:
        self._used: dict[str, set[str]] = {kind: set() for kind in ID_PREFIXES}
        self._counters: dict[str, int] = {kind: 0 for kind in ID_PREFIXES}

    def next(self, kind: str) -> str:
        """Allocate a fresh identifier for ``kind``."""
        prefix = ID_PREFIXES[kind]
        while True:
            self._counters[kind] += 1
            candidate = f"{prefix}{self._counters[kind]}"
            if candidate not in self._used[kind]:
                self._used[kind].add(candidate)
                return candidate

    def reserve(self, kind: str, identifier: str) -> bool:
        """Mark an existing identifier as taken.

        Returns:
            False if the identifier was already taken for this kind.
        """
        used = self._used[kind]
        if identifier in used:
            return False
        used.add(identifier)
        return True

    def copy(self) -> "IdAllocator":
        return copy.deepcopy(self)


@dataclass
class Document:
    """A phylogenetic data document.

    Build documents with the operations in ``phylodoc.model.operations``
    rather than by appending to the block lists directly; the operations
    allocate identifiers and enforce the reference invariants.

    Attributes:
        namespaces: Prefix bindings used by every annotation in the document.
        otus: OTU blocks in addition order.
        trees: Tree blocks in addition order.
        characters: Characters blocks in addition order.
        meta: Root-level annotations.
    """

    namespaces: NamespaceRegistry = field(default_factory=NamespaceRegistry)
    otus: list[OTUBlock] = field(default_factory=list)
    trees: list[TreeBlock] = field(default_factory=list)
    characters: list[CharactersBlock] = field(default_factory=list)
    meta: list[Annotation] = field(default_factory=list)
    ids: IdAllocator = field(default_factory=IdAllocator, compare=False, repr=False)

    @property
    def id(self) -> str:
        return ROOT_ID

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_otu_block(self, block_id: str) -> OTUBlock | None:
        for block in self.otus:
            if block.id == block_id:
                return block
        return None

    def find_otu_block(self, labels: frozenset[str]) -> OTUBlock | None:
        """Get the first OTU block whose label set equals ``labels``."""
        for block in self.otus:
            if block.label_set == labels:
                return block
        return None

    def otu_owner(self) -> dict[str, str]:
        """Map every OTU id to the id of the block that declares it."""
        return {otu.id: block.id for block in self.otus for otu in block.otus}

    def iter_trees(self) -> Iterator[Tree]:
        for block in self.trees:
            yield from block.trees

    def iter_matrices(self) -> Iterator[Matrix]:
        for block in self.characters:
            yield from block.matrices

    def entities(self, level: str) -> list[tuple[str, Annotatable]]:
        """Get ``(id, entity)`` pairs currently present at a level.

        The result is a snapshot: entities added later are not included.

        Raises:
            UnknownLevel: If the level is not known.
        """
        level = normalize_level(level)

        if level == "document":
            return [(ROOT_ID, self)]
        if level == "otus":
            return [(b.id, b) for b in self.otus]
        if level == "otus/otu":
            return [(o.id, o) for b in self.otus for o in b.otus]
        if level == "trees":
            return [(b.id, b) for b in self.trees]
        if level == "trees/tree":
            return [(t.id, t) for t in self.iter_trees()]
        if level == "trees/tree/node":
            return [(n.id, n) for t in self.iter_trees() for n in t.nodes]
        if level == "trees/tree/edge":
            return [(e.id, e) for t in self.iter_trees() for e in t.edges]
        if level == "characters":
            return [(m.id, m) for m in self.iter_matrices()]
        if level == "characters/format/char":
            return [(c.id, c) for m in self.iter_matrices() for c in m.characters]
        # characters/matrix/row
        return [(r.id, r) for m in self.iter_matrices() for r in m.rows]

    # -------------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------------

    def check_references(self) -> None:
        """Check every tip and matrix row reference resolves.

        Raises:
            DanglingReference: Naming the first unresolved OTU id.
            InvalidStructure: If a tip has no OTU reference at all.
        """
        known = set(self.otu_owner())
        for trees in self.trees:
            if trees.otus is not None and self.get_otu_block(trees.otus) is None:
                raise DanglingReference(trees.otus, f"OTU block of tree block {trees.id}")
            for tree in trees.trees:
                check_tree_tips(tree, known)
        for block in self.characters:
            otu_block = self.get_otu_block(block.otus)
            if otu_block is None:
                raise DanglingReference(block.otus, f"OTU block of characters block {block.id}")
            for matrix in block.matrices:
                check_matrix_rows(matrix, otu_block)


def check_tree_tips(tree: Tree, known_otus: set[str]) -> None:
    """Check every tip of ``tree`` references one of ``known_otus``."""
    for node in tree.tips():
        if node.otu is None:
            raise InvalidStructure(node.id, "tip has no OTU reference")
        if node.otu not in known_otus:
            raise DanglingReference(node.otu, f"tip {node.id} of tree {tree.id}")


def check_matrix_rows(matrix: Matrix, otu_block: OTUBlock) -> None:
    """Check every row of ``matrix`` is keyed by an OTU of ``otu_block``."""
    allowed = otu_block.otu_ids
    for row in matrix.rows:
        if row.otu not in allowed:
            raise DanglingReference(row.otu, f"row {row.id} of matrix {matrix.id}")
