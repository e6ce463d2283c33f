"""Operations that build up a document.

Every operation is all-or-nothing: inputs are copied, checked and given
identifiers against a staged allocator, and only committed to the document
once every invariant holds. On failure the document is left as it was.

OTU blocks are shared by value: incoming taxon labels are compared *as a
set* with the label set of each existing OTU block. An exact match reuses
that block, anything else (subset, superset, overlap) creates a new block.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

import pandas as pd
from loguru import logger

from ..core.exceptions import DanglingReference, InvalidStructure
from ..metadata import Annotation, check_resolvable
from .characters import CharactersBlock, Matrix, MatrixData, build_matrix
from .document import (
    ROOT_ID,
    Document,
    IdAllocator,
    check_matrix_rows,
    check_tree_tips,
    normalize_level,
)
from .otus import OTU, OTUBlock
from .trees import Edge, Node, Tree, TreeBlock

if TYPE_CHECKING:
    from ..adapters.protocols import TableAdapter, TreeAdapter


# =============================================================================
# OTUs
# =============================================================================


def _unique_labels(labels: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for label in labels:
        seen.setdefault(str(label), None)
    return list(seen)


def _stage_otu_block(
    document: Document, labels: list[str], ids: IdAllocator
) -> tuple[OTUBlock, bool]:
    """Find the OTU block for ``labels`` or build (without adding) a new one.

    Returns:
        The block and whether it was newly built.
    """
    existing = document.find_otu_block(frozenset(labels))
    if existing is not None:
        logger.debug(f"Reusing OTU block {existing.id} for {len(labels)} taxa")
        return existing, False

    block = OTUBlock(id=ids.next("otus"))
    for label in labels:
        block.otus.append(OTU(id=ids.next("otu"), label=label))
    logger.debug(f"Creating OTU block {block.id} for {len(labels)} taxa")
    return block, True


def add_otus_if_absent(taxon_labels: Iterable[str], document: Document) -> str:
    """Get the id of the OTU block holding exactly these taxa, creating it if needed.

    Args:
        taxon_labels: Taxon labels; order and repeats are ignored for matching.
        document: Document to search and extend.

    Returns:
        Id of the reused or newly created OTU block.
    """
    labels = _unique_labels(taxon_labels)
    if not labels:
        raise ValueError("At least one taxon label is required")

    ids = document.ids.copy()
    block, created = _stage_otu_block(document, labels, ids)
    if created:
        document.otus.append(block)
        document.ids = ids
    return block.id


# =============================================================================
# Trees
# =============================================================================


def _collect_meta(*entities: Any) -> list[Annotation]:
    return [annotation for entity in entities for annotation in entity.meta]


def _reidentify_tree(
    tree: Tree, label_to_otu: Mapping[str, str], ids: IdAllocator
) -> Tree:
    """Copy ``tree`` with document identifiers and resolved tip OTUs."""
    tip_ids = {node.id for node in tree.tips()}
    node_ids: dict[str, str] = {}
    nodes: list[Node] = []
    for node in tree.nodes:
        new_id = ids.next("node")
        node_ids[node.id] = new_id
        otu = node.otu
        if node.id in tip_ids and otu is None and node.label is not None:
            otu = label_to_otu[node.label]
        nodes.append(Node(id=new_id, label=node.label, otu=otu, root=node.root, meta=node.meta))

    edges = [
        Edge(
            id=ids.next("edge"),
            source=node_ids[edge.source],
            target=node_ids[edge.target],
            length=edge.length,
            meta=edge.meta,
        )
        for edge in tree.edges
    ]
    return Tree(id=ids.next("tree"), nodes=nodes, edges=edges, label=tree.label, meta=tree.meta)


def add_tree_block(
    trees: Tree | Sequence[Any],
    document: Document | None = None,
    *,
    label: str | None = None,
    adapter: TreeAdapter | None = None,
) -> Document:
    """Add trees as a new tree block.

    Tips carrying an explicit ``otu`` keep it and must reference an OTU that
    already exists in the document. Tips identified only by ``label`` are
    resolved against the OTU block whose label set equals the set of those
    labels, or a new block when there is none.

    Input trees are copied; node, edge and tree ids are reassigned.

    Args:
        trees: A Tree, or a sequence of Trees (or of host objects when an
            ``adapter`` is given).
        document: Document to extend; a new one is created when omitted.
        label: Optional tree block label.
        adapter: Converts host tree objects with ``adapter.to_tree``.

    Returns:
        The document.

    Raises:
        InvalidStructure: A tree is malformed or a tip has neither label
            nor OTU reference.
        DanglingReference: A tip references an unknown OTU id.
        UnresolvedNamespace: Annotations on the input use unbound prefixes.
    """
    document = document if document is not None else Document()

    if isinstance(trees, (Tree, str)) or not isinstance(trees, Sequence):
        items = [trees]
    else:
        items = list(trees)
    if adapter is not None:
        items = [adapter.to_tree(item) for item in items]
    inputs: list[Tree] = [copy.deepcopy(item) for item in items]
    if not inputs:
        raise ValueError("At least one tree is required")

    labels: list[str] = []
    for tree in inputs:
        tree.check_structure()
        check_resolvable(_collect_meta(tree, *tree.nodes, *tree.edges), document.namespaces)
        for node in tree.tips():
            if node.otu is None:
                if node.label is None:
                    raise InvalidStructure(node.id, "tip has neither a label nor an OTU reference")
                labels.append(node.label)

    ids = document.ids.copy()
    new_otus: OTUBlock | None = None
    label_to_otu: dict[str, str] = {}
    block_otus: str | None = None
    if labels:
        otu_block, created = _stage_otu_block(document, _unique_labels(labels), ids)
        new_otus = otu_block if created else None
        label_to_otu = otu_block.by_label()
        block_otus = otu_block.id

    known = set(document.otu_owner())
    if new_otus is not None:
        known |= new_otus.otu_ids

    tree_block = TreeBlock(id=ids.next("trees"), label=label)
    for tree in inputs:
        new_tree = _reidentify_tree(tree, label_to_otu, ids)
        check_tree_tips(new_tree, known)
        tree_block.trees.append(new_tree)

    if block_otus is None:
        # Every tip was an explicit reference; name the block of the first one
        owners = document.otu_owner()
        first_tip = tree_block.trees[0].tips()[0]
        block_otus = owners.get(first_tip.otu or "")
    tree_block.otus = block_otus

    if new_otus is not None:
        document.otus.append(new_otus)
    document.trees.append(tree_block)
    document.ids = ids
    logger.debug(
        f"Added tree block {tree_block.id} with {len(tree_block.trees)} trees "
        f"(OTU block {tree_block.otus})"
    )
    return document


# =============================================================================
# Characters
# =============================================================================


def _as_matrix_inputs(matrix: Any, adapter: TableAdapter | None = None) -> list[MatrixData]:
    if adapter is not None:
        items = matrix if isinstance(matrix, (list, tuple)) else [matrix]
        inputs = [adapter.to_matrix_data(item) for item in items]
    else:
        if isinstance(matrix, (MatrixData, pd.DataFrame)):
            matrix = [matrix]
        inputs = [
            MatrixData.from_frame(item) if isinstance(item, pd.DataFrame) else item
            for item in matrix
        ]
    if not inputs:
        raise ValueError("At least one matrix is required")
    return inputs


def add_characters_block(
    matrix: MatrixData | pd.DataFrame | Sequence[MatrixData | pd.DataFrame],
    document: Document | None = None,
    *,
    adapter: TableAdapter | None = None,
) -> Document:
    """Add one or more character matrices.

    Each label-keyed matrix is placed on the OTU block whose label set
    equals its own row labels; matrices in one call with equal label sets
    share a block. Matrices keyed by OTU id name their block in
    ``MatrixData.otus``. Each matrix joins the characters block with the
    same data kind and OTU block, or starts a new one.

    Args:
        matrix: MatrixData, a DataFrame indexed by taxon label, or a
            sequence of either.
        document: Document to extend; a new one is created when omitted.
        adapter: Converts host tables with ``adapter.to_matrix_data``.

    Returns:
        The document.

    Raises:
        DanglingReference: A named OTU block or row OTU id does not exist.
        InvalidStructure: A row does not fit the declared columns or kind.
    """
    document = document if document is not None else Document()
    inputs = _as_matrix_inputs(matrix, adapter)
    ids = document.ids.copy()

    new_otus: list[OTUBlock] = []
    by_label_set: dict[frozenset[str], OTUBlock] = {}

    staged: list[tuple[OTUBlock, Matrix]] = []
    for data in inputs:
        if data.otus is None:
            labels = _unique_labels(data.rows)
            if not labels:
                raise ValueError("A label-keyed matrix needs at least one row")
            otu_block = by_label_set.get(frozenset(labels))
            if otu_block is None:
                otu_block, created = _stage_otu_block(document, labels, ids)
                by_label_set[frozenset(labels)] = otu_block
                if created:
                    new_otus.append(otu_block)
            by_label = otu_block.by_label()
            row_otus = {key: by_label[str(key)] for key in data.rows}
        else:
            found = document.get_otu_block(data.otus)
            if found is None:
                raise DanglingReference(data.otus, "OTU block named by matrix input")
            otu_block = found
            row_otus = {key: key for key in data.rows}

        new_matrix = build_matrix(data, row_otus, ids.next)
        new_matrix.check_structure()
        check_matrix_rows(new_matrix, otu_block)
        staged.append((otu_block, new_matrix))

    document.otus.extend(new_otus)
    for otu_block, new_matrix in staged:
        block = _characters_block_for(document, otu_block.id, new_matrix, ids)
        block.matrices.append(new_matrix)
        logger.debug(
            f"Added {new_matrix.kind.value} matrix {new_matrix.id} "
            f"({len(new_matrix.rows)} rows) to characters block {block.id}"
        )
    document.ids = ids
    return document


def _characters_block_for(
    document: Document, otus_id: str, matrix: Matrix, ids: IdAllocator
) -> CharactersBlock:
    for block in document.characters:
        if block.otus == otus_id and block.kind is matrix.kind:
            return block
    block = CharactersBlock(id=ids.next("block"), otus=otus_id, kind=matrix.kind)
    document.characters.append(block)
    return block


# =============================================================================
# Metadata
# =============================================================================


def add_metadata(
    annotation: Annotation | Sequence[Annotation],
    document: Document | None = None,
    target_level: str = "document",
    target_id: str | None = None,
    *,
    namespaces: Mapping[str, str] | None = None,
) -> Document:
    """Attach annotations to the document root or to entities at a level.

    Without ``target_id``, every entity present at ``target_level`` *at the
    time of the call* receives its own copy. This is a one-off application,
    not a live rule: entities added afterwards get nothing.

    Args:
        annotation: One annotation or a sequence of them.
        document: Document to annotate; a new one is created when omitted.
        target_level: "document" or an entity level such as "otus/otu".
        target_id: Restrict to the entity with this id.
        namespaces: Extra prefix bindings to register first.

    Returns:
        The document.

    Raises:
        NamespaceConflict: ``namespaces`` rebinds a prefix.
        UnresolvedNamespace: An annotation prefix is not bound.
        UnknownLevel: ``target_level`` is not a known level.
        DanglingReference: ``target_id`` names no entity at that level.
    """
    document = document if document is not None else Document()
    annotations = [annotation] if isinstance(annotation, Annotation) else list(annotation)

    registry = document.namespaces.copy()
    if namespaces:
        registry.register_all(namespaces)
    check_resolvable(annotations, registry)

    targets = _select_targets(document, target_level, target_id)

    if namespaces:
        document.namespaces.register_all(namespaces)
    for _, target in targets:
        target.meta.extend(a.copy() for a in annotations)
    logger.debug(
        f"Attached {len(annotations)} annotations to {len(targets)} "
        f"entities at level '{target_level}'"
    )
    return document


def remove_metadata(
    document: Document,
    target_level: str = "document",
    target_id: str | None = None,
    property: str | None = None,
) -> int:
    """Remove annotations from entities at a level.

    Args:
        document: Document to modify.
        target_level: Level to remove from.
        target_id: Restrict to one entity.
        property: Only remove top-level annotations with this property;
            all annotations are removed when omitted.

    Returns:
        Number of annotations removed.
    """
    removed = 0
    for _, target in _select_targets(document, target_level, target_id):
        kept = [a for a in target.meta if property is not None and a.property != property]
        removed += len(target.meta) - len(kept)
        target.meta[:] = kept
    return removed


def _select_targets(document: Document, level: str, target_id: str | None):
    level = normalize_level(level)
    targets = document.entities(level)
    if target_id is None or (level == "document" and target_id == ROOT_ID):
        return targets
    selected = [(entity_id, entity) for entity_id, entity in targets if entity_id == target_id]
    if not selected:
        raise DanglingReference(target_id, f"no entity at level '{level}'")
    return selected
