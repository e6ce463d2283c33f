"""Tests for bibliographic metadata and identifier annotation."""

from datetime import date

import pytest

from phylodoc.core.exceptions import UnresolvedNamespace
from phylodoc.model import CC0_LICENSE, add_basic_meta, annotate_identifiers


class FakeResolver:
    """Resolver returning canned identifiers."""

    def __init__(self, table):
        self.table = table
        self.calls = []

    def resolve(self, label):
        self.calls.append(label)
        return self.table.get(label, [])


class FailingResolver:
    """Resolver that fails on one label."""

    def resolve(self, label):
        if label == "C":
            raise RuntimeError("lookup failed")
        return [f"http://example.org/{label}"]


class TestAddBasicMeta:
    """Tests for add_basic_meta."""

    def test_adds_dublin_core(self):
        """Given fields should become root annotations, in order."""
        document = add_basic_meta(title="Primates", creator="Ada", pubdate=date(2024, 1, 5))

        assert [a.property for a in document.meta] == ["dc:title", "dc:creator", "dc:date", "cc:license"]
        assert document.meta[2].content == date(2024, 1, 5)
        assert document.meta[3].href == CC0_LICENSE

    def test_rights_can_be_omitted(self):
        """rights=None should skip the license."""
        document = add_basic_meta(rights=None)
        assert "cc:license" not in [a.property for a in document.meta]

    def test_date_defaults_to_today(self):
        """dc:date should default to today."""
        document = add_basic_meta()
        assert document.meta[0].content == date.today()


class TestAnnotateIdentifiers:
    """Tests for annotate_identifiers."""

    def test_attaches_each_candidate(self, tree_document):
        """Every candidate URI should become one resource annotation."""
        resolver = FakeResolver({"A": ["http://example.org/1", "http://example.org/2"], "B": ["http://example.org/3"]})

        count = annotate_identifiers(tree_document, resolver)

        otus = {o.label: o for o in tree_document.otus[0].otus}
        assert count == 3
        assert [a.href for a in otus["A"].meta] == ["http://example.org/1", "http://example.org/2"]
        assert otus["C"].meta == []
        assert all(a.property == "tc:toTaxon" for a in otus["A"].meta)

    def test_failure_leaves_document_unchanged(self, tree_document):
        """A resolver error should attach nothing."""
        with pytest.raises(RuntimeError):
            annotate_identifiers(tree_document, FailingResolver())

        assert all(not o.meta for _, o in tree_document.entities("otus/otu"))

    def test_unbound_property_rejected(self, tree_document):
        """The property prefix must be registered."""
        with pytest.raises(UnresolvedNamespace):
            annotate_identifiers(tree_document, FakeResolver({}), property="ex:id")
