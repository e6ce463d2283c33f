"""Tests for character tables and the merge policy."""

import math

import pandas as pd

from phylodoc.model import Document, MatrixData, add_characters_block
from phylodoc.projection import TAXA_COLUMN, get_characters, get_characters_list


class UpperAdapter:
    """TableAdapter returning column names in upper case."""

    def to_matrix_data(self, table):
        return MatrixData.from_frame(table)

    def from_frame(self, frame):
        return [str(c).upper() for c in frame.columns]


class TestGetCharacters:
    """Tests for get_characters."""

    def test_same_otus_merge_into_one_table(self, full_document):
        """Matrices over one OTU block should merge column-wise."""
        frame = get_characters(full_document)

        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["wings", "legs", "mass"]
        assert list(frame.index) == ["A", "B", "C"]
        assert frame.index.name == TAXA_COLUMN

    def test_values_and_types(self, full_document):
        """Discrete cells are strings, continuous cells floats, missing NaN."""
        frame = get_characters(full_document)

        assert frame.loc["A", "wings"] == "yes"
        assert frame.loc["C", "legs"] == "8"
        assert frame.loc["B", "mass"] == 2.25
        assert math.isnan(frame.loc["C", "mass"])
        assert frame["mass"].dtype == "float64"

    def test_rownames_as_column(self, full_document):
        """Taxon labels may be returned as a leading column."""
        frame = get_characters(full_document, rownames_as_column=True)

        assert list(frame.columns)[0] == TAXA_COLUMN
        assert list(frame[TAXA_COLUMN]) == ["A", "B", "C"]

    def test_different_otus_stay_separate(self, full_document):
        """Matrices over different OTU blocks should never be joined."""
        other = MatrixData(kind="continuous", columns=["height"], rows={"A": [1.0], "D": [2.0]})
        add_characters_block(other, full_document)

        tables = get_characters(full_document)

        assert isinstance(tables, dict)
        assert len(tables) == 2
        second = tables[full_document.otus[1].id]
        assert list(second.index) == ["A", "D"]
        assert list(second.columns) == ["height"]

    def test_one_call_over_different_taxa_stays_separate(self, tree_document):
        """Matrices added together over different taxa should not be padded together."""
        abc = MatrixData(kind="continuous", columns=["x"], rows={"A": [1.0], "B": [2.0], "C": [3.0]})
        de = MatrixData(kind="continuous", columns=["y"], rows={"D": [4.0], "E": [5.0]})
        add_characters_block([abc, de], tree_document)

        tables = get_characters(tree_document)

        assert isinstance(tables, dict)
        first, second = tables.values()
        assert list(first.index) == ["A", "B", "C"]
        assert list(first.columns) == ["x"]
        assert list(second.index) == ["D", "E"]
        assert list(second.columns) == ["y"]

    def test_list_always_returns_dict(self, full_document):
        """get_characters_list should return a dict even for one group."""
        tables = get_characters_list(full_document)
        assert list(tables) == [full_document.otus[0].id]

    def test_no_characters(self):
        """A document without matrices should give an empty dict."""
        assert get_characters(Document()) == {}

    def test_adapter_applied(self, full_document):
        """A TableAdapter should convert each table."""
        assert get_characters(full_document, adapter=UpperAdapter()) == ["WINGS", "LEGS", "MASS"]

    def test_duplicate_column_names_fall_back_to_ids(self, tree_document, morphology):
        """A repeated column name should be disambiguated by character id."""
        add_characters_block(morphology, tree_document)
        add_characters_block(morphology, tree_document)

        frame = get_characters(tree_document)

        assert len(frame.columns) == 4
        assert list(frame.columns)[:2] == ["wings", "legs"]
