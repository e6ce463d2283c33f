"""Tests for get_trees and get_trees_list."""

from phylodoc.model import Document, Tree, add_tree_block
from phylodoc.projection import TreeShape, get_trees, get_trees_list


class TestGetTrees:
    """Tests for the shape-tagged tree view."""

    def test_single_tree(self, tree_document):
        """One block with one tree should be SINGLE."""
        view = get_trees(tree_document)

        assert view.shape is TreeShape.SINGLE
        assert isinstance(view.value, Tree)

    def test_one_block_many_trees(self, newick):
        """One block with several trees should be LIST."""
        document = add_tree_block(["(A,B);", "(B,A);"], adapter=newick)
        view = get_trees(document)

        assert view.shape is TreeShape.LIST
        assert len(view.value) == 2

    def test_many_blocks(self, tree_document, newick):
        """Several blocks should be NESTED."""
        add_tree_block(newick.to_tree("(A,(B,C));"), tree_document)
        view = get_trees(tree_document)

        assert view.shape is TreeShape.NESTED
        assert [len(block) for block in view.value] == [1, 1]

    def test_no_trees(self):
        """An empty document should be NESTED with no blocks."""
        view = get_trees(Document())
        assert view.shape is TreeShape.NESTED
        assert view.value == []

    def test_returns_copies(self, tree_document):
        """Mutating a returned tree should not touch the document."""
        tree = get_trees(tree_document).value
        tree.nodes.clear()
        assert tree_document.trees[0].trees[0].nodes

    def test_adapter_output(self, tree_document, newick):
        """An adapter should convert each tree."""
        blocks = get_trees_list(tree_document, adapter=newick)
        assert blocks == [["((A:1.0,B:2.0):0.5,C:3.0);"]]
