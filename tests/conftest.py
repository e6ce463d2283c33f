"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from phylodoc.adapters import NewickAdapter
from phylodoc.metadata import meta
from phylodoc.model import Document, MatrixData, add_characters_block, add_metadata, add_tree_block


@pytest.fixture
def newick() -> NewickAdapter:
    """Provide a Newick adapter."""
    return NewickAdapter()


@pytest.fixture
def tree_document(newick: NewickAdapter) -> Document:
    """Provide a document with one tree over taxa A, B and C."""
    return add_tree_block(newick.to_tree("((A:1.0,B:2.0):0.5,C:3.0);"))


@pytest.fixture
def morphology() -> MatrixData:
    """Provide a discrete matrix over taxa A, B and C."""
    return MatrixData(
        kind="discrete",
        columns=["wings", "legs"],
        rows={"A": ["yes", "6"], "B": ["no", "6"], "C": ["yes", "8"]},
    )


@pytest.fixture
def sizes() -> MatrixData:
    """Provide a continuous matrix over taxa A, B and C."""
    return MatrixData(
        kind="continuous",
        columns=["mass"],
        rows={"A": [1.5], "B": [2.25], "C": [None]},
    )


@pytest.fixture
def full_document(tree_document: Document, morphology: MatrixData, sizes: MatrixData) -> Document:
    """Provide a document with trees, two matrices and annotations."""
    add_characters_block([morphology, sizes], tree_document)
    add_metadata(meta("dc:title", "Test study"), tree_document)
    add_metadata(
        meta("dc:creator", children=[meta("foaf:name", "Ada"), meta("foaf:mbox", href="mailto:ada@example.org")]),
        tree_document,
    )
    add_metadata(meta("ex:rank", 3), tree_document, "otus/otu", "ou1", namespaces={"ex": "http://example.org/terms#"})
    return tree_document


@pytest.fixture
def nexml_path(tmp_path: Path) -> Path:
    """Provide a path for a temporary NeXML file."""
    return tmp_path / "document.xml"
