"""Tests for get_metadata."""

import pandas as pd
import pytest

from phylodoc.core.exceptions import UnknownLevel
from phylodoc.metadata import meta
from phylodoc.model import Document, add_metadata
from phylodoc.projection import get_metadata


class TestGetMetadata:
    """Tests for the wide metadata table."""

    def test_document_level(self, full_document):
        """Root annotations should give one row keyed 'document'."""
        frame = get_metadata(full_document)

        assert list(frame.index) == ["document"]
        assert frame.loc["document", "dc:title"] == "Test study"

    def test_nested_annotations_become_paths(self, full_document):
        """Children should appear as path columns; blank parents have no column."""
        frame = get_metadata(full_document)

        assert "dc:creator/foaf:name" in frame.columns
        assert frame.loc["document", "dc:creator/foaf:name"] == "Ada"
        assert frame.loc["document", "dc:creator/foaf:mbox"] == "mailto:ada@example.org"
        assert "dc:creator" not in frame.columns

    def test_entity_level_has_row_per_entity(self, full_document):
        """Every entity at the level is a row; missing values are None."""
        frame = get_metadata(full_document, "otus/otu")

        assert list(frame.index) == ["ou1", "ou2", "ou3"]
        assert frame.loc["ou1", "ex:rank"] == 3
        assert frame.loc["ou2", "ex:rank"] is None

    def test_repeated_property_becomes_list(self):
        """A property repeated on one entity should give a list."""
        document = add_metadata([meta("dc:subject", "a"), meta("dc:subject", "b")])
        frame = get_metadata(document)
        assert frame.loc["document", "dc:subject"] == ["a", "b"]

    def test_level_without_entities(self):
        """Levels with no entities should give an empty table."""
        frame = get_metadata(Document(), "trees/tree")

        assert isinstance(frame, pd.DataFrame)
        assert frame.empty
        assert frame.index.name == "id"

    def test_all_returns_raw_annotations(self, full_document):
        """'all' should map annotated entity ids to annotation copies."""
        result = get_metadata(full_document, "all")

        assert set(result) == {"document", "ou1"}
        assert [a.property for a in result["document"]] == ["dc:title", "dc:creator"]
        result["ou1"].clear()
        assert len(full_document.otus[0].otus[0].meta) == 1

    def test_unknown_level(self, full_document):
        """Unknown levels should raise UnknownLevel, also a ValueError."""
        with pytest.raises(UnknownLevel):
            get_metadata(full_document, "galaxies")
        with pytest.raises(ValueError):
            get_metadata(full_document, "galaxies")
