"""Newick text adapter.

Converts Newick strings into input trees for ``add_tree_block`` and back,
using DendroPy's Newick reader and writer. Tip names become node labels
(taxon labels); internal names are kept as internal node labels. Bracketed
comments are discarded.
"""

from __future__ import annotations

from typing import Mapping

import dendropy
from dendropy.utility.error import DataParseError

from ..core.exceptions import InvalidStructure
from ..model.trees import Edge, Node, Tree


def _length(node: dendropy.Node) -> float | None:
    length = node.edge.length
    if length is None:
        return None
    try:
        return float(length)
    except (TypeError, ValueError):
        raise InvalidStructure("newick", f"invalid branch length '{length}'") from None


class NewickAdapter:
    """TreeAdapter for Newick strings.

    Example:
        adapter = NewickAdapter()
        tree = adapter.to_tree("((A:1,B:2):0.5,C:3);")
        document = add_tree_block(tree)

        # Document trees reference OTUs; pass labels to write them back out
        labels = {otu.id: otu.label for block in document.otus for otu in block.otus}
        NewickAdapter(otu_labels=labels).from_tree(document.trees[0].trees[0])
    """

    def __init__(self, otu_labels: Mapping[str, str | None] | None = None, *, rooted: bool = True):
        """Initialize the adapter.

        Args:
            otu_labels: OTU id to label, used when writing tips that carry
                an OTU reference.
            rooted: Whether parsed trees get a root flag.
        """
        self._otu_labels = dict(otu_labels or {})
        self._rooted = rooted

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def to_tree(self, obj: str) -> Tree:
        """Parse one Newick tree.

        Raises:
            InvalidStructure: If the text is not a single Newick tree.
        """
        if not obj.strip().endswith(";"):
            raise InvalidStructure("newick", "tree must end with ';'")
        try:
            source = dendropy.Tree.get(
                data=obj,
                schema="newick",
                rooting="force-rooted" if self._rooted else "force-unrooted",
                preserve_underscores=True,
            )
        except (DataParseError, ValueError) as e:
            raise InvalidStructure("newick", str(e)) from e

        # Root branch length is not kept but must still be numeric
        _length(source.seed_node)
        tree = Tree(id="newick")
        node_ids: dict[dendropy.Node, str] = {}
        for source_node in source.preorder_node_iter():
            node = Node(id=f"n{len(tree.nodes) + 1}")
            if source_node.is_leaf():
                node.label = source_node.taxon.label if source_node.taxon is not None else None
            else:
                node.label = source_node.label
            node_ids[source_node] = node.id
            tree.nodes.append(node)

            parent = source_node.parent_node
            if parent is not None:
                tree.edges.append(
                    Edge(
                        id=f"e{len(tree.edges) + 1}",
                        source=node_ids[parent],
                        target=node.id,
                        length=_length(source_node),
                    )
                )
        tree.nodes[0].root = self._rooted
        return tree

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def from_tree(self, tree: Tree) -> str:
        """Write a tree as a Newick string."""
        children = tree.children()
        targets = {edge.target for edge in tree.edges}
        lengths = {edge.target: edge.length for edge in tree.edges}
        nodes = {node.id: node for node in tree.nodes}

        roots = [node for node in tree.nodes if node.id not in targets]
        if len(roots) != 1:
            raise InvalidStructure(tree.id, "tree must have exactly one parentless node")

        taxa = dendropy.TaxonNamespace()
        target = dendropy.Tree(taxon_namespace=taxa, is_rooted=tree.rooted)

        def build(node_id: str, target_node: dendropy.Node) -> None:
            name = self._node_name(nodes[node_id])
            if children.get(node_id):
                target_node.label = name
                for child_id in children[node_id]:
                    build(child_id, target_node.new_child(edge_length=lengths.get(child_id)))
            elif name:
                target_node.taxon = taxa.require_taxon(label=name)

        build(roots[0].id, target.seed_node)
        text = target.as_string(
            schema="newick",
            suppress_rooting=True,
            preserve_spaces=True,
        )
        return text.strip()

    def _node_name(self, node: Node) -> str | None:
        if node.otu is not None and self._otu_labels.get(node.otu):
            return self._otu_labels[node.otu]
        return node.label or node.otu
