"""Tests for Document lookups and levels."""

import pytest

from phylodoc.core.exceptions import UnknownLevel
from phylodoc.model import LEVELS, Document, IdAllocator, normalize_level


class TestLevels:
    """Tests for level names."""

    def test_aliases(self):
        """'nexml' and slashes should normalise."""
        assert normalize_level("nexml") == "document"
        assert normalize_level("/otus/otu/") == "otus/otu"

    def test_unknown(self):
        """Unknown levels raise UnknownLevel listing the known ones."""
        with pytest.raises(UnknownLevel) as exc_info:
            normalize_level("galaxies")
        assert exc_info.value.known == list(LEVELS)


class TestIdAllocator:
    """Tests for IdAllocator."""

    def test_prefixes(self):
        """Ids carry a kind-specific prefix."""
        ids = IdAllocator()
        assert ids.next("otus") == "os1"
        assert ids.next("otu") == "ou1"
        assert ids.next("otu") == "ou2"

    def test_skips_reserved(self):
        """Reserved ids are never handed out."""
        ids = IdAllocator()
        assert ids.reserve("tree", "tr1")
        assert not ids.reserve("tree", "tr1")
        assert ids.next("tree") == "tr2"

    def test_copy_is_independent(self):
        """Allocating on a copy leaves the original alone."""
        ids = IdAllocator()
        clone = ids.copy()
        clone.next("node")
        assert ids.next("node") == "nd1"


class TestEntities:
    """Tests for Document.entities."""

    def test_empty_document(self):
        """Only the root exists in an empty document."""
        document = Document()
        assert document.entities("document") == [("document", document)]
        assert document.entities("trees/tree/node") == []

    def test_full_document(self, full_document):
        """Every level lists its entities in order."""
        assert [i for i, _ in full_document.entities("otus/otu")] == ["ou1", "ou2", "ou3"]
        assert len(full_document.entities("characters")) == 2
        assert len(full_document.entities("characters/matrix/row")) == 6

    def test_otu_owner(self, full_document):
        """Every OTU maps to its block."""
        assert set(full_document.otu_owner().values()) == {"os1"}
