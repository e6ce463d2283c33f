"""Tests for tree structure checks."""

import pytest

from phylodoc.core.exceptions import InvalidStructure
from phylodoc.model import Edge, Node, Tree


def _cherry(**edge_kwargs) -> Tree:
    return Tree(
        id="t1",
        nodes=[Node(id="r", root=True), Node(id="a", label="A"), Node(id="b", label="B")],
        edges=[
            Edge(id="e1", source="r", target="a", **edge_kwargs),
            Edge(id="e2", source="r", target="b"),
        ],
    )


class TestTreeQueries:
    """Tests for tips, internal nodes and children."""

    def test_tips_and_internal(self):
        """Tips have no outgoing edges."""
        tree = _cherry()

        assert [n.id for n in tree.tips()] == ["a", "b"]
        assert [n.id for n in tree.internal_nodes()] == ["r"]
        assert tree.children()["r"] == ["a", "b"]
        assert tree.rooted

    def test_length_coerced_to_float(self):
        """Edge lengths should be stored as floats."""
        assert _cherry(length=1).edges[0].length == 1.0


class TestCheckStructure:
    """Tests for Tree.check_structure."""

    def test_valid_tree_passes(self):
        """A well-formed cherry should pass."""
        _cherry(length=0.5).check_structure()

    def test_empty_tree(self):
        """Trees need at least one node."""
        with pytest.raises(InvalidStructure):
            Tree(id="t").check_structure()

    def test_negative_length(self):
        """Negative lengths are invalid."""
        with pytest.raises(InvalidStructure, match="negative"):
            _cherry(length=-1.0).check_structure()

    def test_unknown_endpoint(self):
        """Edges must join nodes of the tree."""
        tree = _cherry()
        tree.edges[1].target = "zz"
        with pytest.raises(InvalidStructure):
            tree.check_structure()

    def test_two_parents(self):
        """A node may have at most one parent."""
        tree = _cherry()
        tree.nodes.append(Node(id="c", label="C"))
        tree.edges.append(Edge(id="e3", source="a", target="b"))
        with pytest.raises(InvalidStructure, match="parent"):
            tree.check_structure()

    def test_disconnected(self):
        """All nodes must be connected."""
        tree = _cherry()
        tree.nodes.append(Node(id="c", label="C"))
        with pytest.raises(InvalidStructure, match="connected"):
            tree.check_structure()

    def test_two_roots(self):
        """At most one node may be flagged as root."""
        tree = _cherry()
        tree.nodes[1].root = True
        with pytest.raises(InvalidStructure, match="root"):
            tree.check_structure()

    def test_internal_node_with_otu(self):
        """Internal nodes must not reference OTUs."""
        tree = _cherry()
        tree.nodes[0].otu = "ou1"
        with pytest.raises(InvalidStructure, match="internal"):
            tree.check_structure()
