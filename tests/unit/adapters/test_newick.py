"""Tests for the Newick adapter."""

import pytest

from phylodoc.adapters import NewickAdapter, TreeAdapter
from phylodoc.core.exceptions import InvalidStructure


class TestToTree:
    """Tests for parsing Newick."""

    def test_is_tree_adapter(self, newick):
        """NewickAdapter should satisfy the TreeAdapter protocol."""
        assert isinstance(newick, TreeAdapter)

    def test_labels_and_lengths(self, newick):
        """Tips become labelled nodes, lengths go on incoming edges."""
        tree = newick.to_tree("((A:1,B:2.5)X:0.5,C:3);")

        assert sorted(n.label for n in tree.tips()) == ["A", "B", "C"]
        assert [n.label for n in tree.internal_nodes()] == [None, "X"]
        assert sorted(e.length for e in tree.edges) == [0.5, 1.0, 2.5, 3.0]
        tree.check_structure()

    def test_root_flag(self):
        """Rooted parsing flags the outermost node."""
        assert NewickAdapter().to_tree("(A,B);").nodes[0].root
        assert not NewickAdapter(rooted=False).to_tree("(A,B);").rooted

    def test_quoted_labels_and_comments(self, newick):
        """Quoted labels keep punctuation; comments are dropped."""
        tree = newick.to_tree("('Homo sapiens'[a comment],'O''Brien');")
        assert [n.label for n in tree.tips()] == ["Homo sapiens", "O'Brien"]

    @pytest.mark.parametrize("text", ["(A,B)", "", "(A,B;", "(A,B):x;", "(A:x,B);"])
    def test_malformed(self, newick, text):
        """Malformed Newick should raise InvalidStructure."""
        with pytest.raises(InvalidStructure):
            newick.to_tree(text)


class TestFromTree:
    """Tests for writing Newick."""

    def test_round_trip(self, newick):
        """Writing a parsed tree gives the canonical text back."""
        text = "((A:1.0,B:2.5)X:0.5,C:3.0);"
        assert newick.from_tree(newick.to_tree(text)) == text

    def test_quotes_when_needed(self, newick):
        """Labels with spaces are quoted."""
        assert newick.from_tree(newick.to_tree("('a b',c);")) == "('a b',c);"

    def test_uses_otu_labels(self, tree_document):
        """Tips referencing OTUs are written with the OTU label."""
        labels = {otu.id: f"taxon {otu.label}" for otu in tree_document.otus[0].otus}
        text = NewickAdapter(labels).from_tree(tree_document.trees[0].trees[0])
        assert text == "(('taxon A':1.0,'taxon B':2.0):0.5,'taxon C':3.0);"
