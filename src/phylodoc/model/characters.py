"""Character matrices and characters blocks.

A matrix holds characters (columns) and rows keyed by OTU id. Rows are
sparse: a row stores only the cells it declares. Discrete and molecular
characters point at a state set; cell values are the state's label (or its
symbol when the state has no label). Continuous cells are floats.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

import pandas as pd
from pandas.api.types import is_numeric_dtype, is_scalar

from ..core.exceptions import InvalidStructure
from ..metadata import Annotation


class DataKind(str, Enum):
    """Kind of data held by a matrix."""

    DISCRETE = "discrete"
    CONTINUOUS = "continuous"
    MOLECULAR = "molecular"


MOLECULES = ("dna", "rna", "protein")


@dataclass
class State:
    """One state of a state set."""

    id: str
    symbol: str
    label: str | None = None

    @property
    def value(self) -> str:
        return self.label if self.label is not None else self.symbol


@dataclass
class StateSet:
    id: str
    states: list[State] = field(default_factory=list)

    def by_value(self) -> dict[str, State]:
        return {state.value: state for state in self.states}

    def by_id(self) -> dict[str, State]:
        return {state.id: state for state in self.states}


@dataclass
class Character:
    """A matrix column."""

    id: str
    label: str | None = None
    states: str | None = None
    meta: list[Annotation] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.label if self.label is not None else self.id


@dataclass
class Row:
    """A matrix row for one OTU; ``cells`` maps character id to value."""

    id: str
    otu: str
    cells: dict[str, Any] = field(default_factory=dict)
    label: str | None = None
    meta: list[Annotation] = field(default_factory=list)


@dataclass
class Matrix:
    """A character matrix.

    Attributes:
        id: Matrix identifier.
        kind: Discrete, continuous or molecular.
        characters: Columns in order.
        rows: Rows in order.
        state_sets: State sets referenced by the characters.
        label: Optional matrix label.
        molecule: "dna", "rna" or "protein" for molecular matrices.
        meta: Matrix annotations.
    """

    id: str
    kind: DataKind
    characters: list[Character] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    state_sets: list[StateSet] = field(default_factory=list)
    label: str | None = None
    molecule: str | None = None
    meta: list[Annotation] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.kind = DataKind(self.kind)

    def get_state_set(self, states_id: str | None) -> StateSet | None:
        for state_set in self.state_sets:
            if state_set.id == states_id:
                return state_set
        return None

    def check_structure(self) -> None:
        """Check columns, state sets and cells are consistent.

        Raises:
            InvalidStructure: Naming the offending matrix, column or row.
        """
        char_ids: set[str] = set()
        for char in self.characters:
            if char.id in char_ids:
                raise InvalidStructure(char.id, "duplicate character id")
            char_ids.add(char.id)
            if self.kind is not DataKind.CONTINUOUS and self.get_state_set(char.states) is None:
                raise InvalidStructure(char.id, f"unknown state set '{char.states}'")

        states_by_char = {
            char.id: self.get_state_set(char.states) for char in self.characters
        }
        row_ids: set[str] = set()
        row_otus: set[str] = set()
        for row in self.rows:
            if row.id in row_ids:
                raise InvalidStructure(row.id, "duplicate row id")
            row_ids.add(row.id)
            if row.otu in row_otus:
                raise InvalidStructure(row.id, f"second row for OTU '{row.otu}'")
            row_otus.add(row.otu)
            for char_id, value in row.cells.items():
                if char_id not in char_ids:
                    raise InvalidStructure(row.id, f"cell for unknown character '{char_id}'")
                if self.kind is DataKind.CONTINUOUS:
                    if not isinstance(value, float):
                        raise InvalidStructure(row.id, f"non-numeric continuous cell {value!r}")
                else:
                    state_set = states_by_char[char_id]
                    if state_set is None or value not in state_set.by_value():
                        raise InvalidStructure(row.id, f"cell value {value!r} not in state set")


@dataclass
class CharactersBlock:
    """Matrices of one kind sharing one OTU block."""

    id: str
    otus: str
    kind: DataKind
    matrices: list[Matrix] = field(default_factory=list)


# =============================================================================
# Input
# =============================================================================


@dataclass
class MatrixData:
    """Caller-side description of a matrix to add to a document.

    Rows are keyed by taxon label, or by OTU id of an existing block when
    ``otus`` is set. Each row is either a sequence aligned with ``columns``
    or a mapping from column name to value; ``None`` (or NaN) means no cell.

    Example:
        MatrixData(
            kind="discrete",
            columns=["wings", "legs"],
            rows={"Bee": ["yes", 6], "Ant": ["no", 6]},
        )
    """

    kind: DataKind | str
    columns: list[str]
    rows: Mapping[str, Sequence[Any] | Mapping[str, Any]]
    label: str | None = None
    molecule: str | None = None
    otus: str | None = None

    def __post_init__(self) -> None:
        self.kind = DataKind(self.kind)
        self.columns = list(self.columns)
        if self.kind is DataKind.MOLECULAR:
            self.molecule = self.molecule or "dna"
            if self.molecule not in MOLECULES:
                raise ValueError(f"Unknown molecule type: '{self.molecule}'")

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        kind: DataKind | str | None = None,
        label: str | None = None,
    ) -> "MatrixData":
        """Build from a DataFrame indexed by taxon label.

        Frames whose columns are all numeric are continuous unless ``kind``
        says otherwise; everything else is discrete.
        """
        if kind is None:
            numeric = all(is_numeric_dtype(frame[col]) for col in frame.columns)
            kind = DataKind.CONTINUOUS if numeric and len(frame.columns) else DataKind.DISCRETE
        rows = {
            str(index): list(values)
            for index, values in zip(frame.index, frame.itertuples(index=False, name=None))
        }
        return cls(kind=kind, columns=[str(c) for c in frame.columns], rows=rows, label=label)

    def row_cells(self) -> dict[str, dict[str, Any]]:
        """Normalise rows to ``{row key: {column: value}}`` without gaps.

        Raises:
            InvalidStructure: If a row is misaligned or a value has the
                wrong type for the matrix kind.
        """
        result: dict[str, dict[str, Any]] = {}
        for key, row in self.rows.items():
            if isinstance(row, Mapping):
                unknown = [col for col in row if col not in self.columns]
                if unknown:
                    raise InvalidStructure(key, f"unknown column '{unknown[0]}'")
                pairs = [(col, row.get(col)) for col in self.columns]
            else:
                values = list(row)
                if len(values) != len(self.columns):
                    raise InvalidStructure(
                        key, f"row has {len(values)} values for {len(self.columns)} columns"
                    )
                pairs = list(zip(self.columns, values))

            cells: dict[str, Any] = {}
            for col, value in pairs:
                if _is_missing(value):
                    continue
                cells[col] = self._coerce(key, value)
            result[key] = cells
        return result

    def _coerce(self, key: str, value: Any) -> Any:
        if self.kind is DataKind.CONTINUOUS:
            if isinstance(value, bool):
                raise InvalidStructure(key, f"non-numeric continuous value {value!r}")
            try:
                return float(value)
            except (TypeError, ValueError):
                raise InvalidStructure(key, f"non-numeric continuous value {value!r}") from None
        return str(value)


def _is_missing(value: Any) -> bool:
    return value is None or (is_scalar(value) and bool(pd.isna(value)))


def build_matrix(
    data: MatrixData,
    row_otus: Mapping[str, str],
    next_id: Callable[[str], str],
) -> Matrix:
    """Turn caller input into a Matrix with fresh identifiers.

    Args:
        data: Caller input.
        row_otus: Maps each row key of ``data`` to its OTU id.
        next_id: Allocates a new identifier for an entity kind.

    Returns:
        A new Matrix; discrete characters get one state set each, a
        molecular matrix shares one state set over all its characters.
    """
    cells_by_key = data.row_cells()
    matrix = Matrix(
        id=next_id("matrix"),
        kind=data.kind,
        label=data.label,
        molecule=data.molecule if data.kind is DataKind.MOLECULAR else None,
    )

    char_ids: dict[str, str] = {}
    for column in data.columns:
        char = Character(id=next_id("char"), label=column)
        char_ids[column] = char.id
        matrix.characters.append(char)

    if data.kind is DataKind.DISCRETE:
        for column, char in zip(data.columns, matrix.characters):
            observed = _sorted_unique(
                cells[column] for cells in cells_by_key.values() if column in cells
            )
            state_set = StateSet(id=next_id("states"))
            for index, value in enumerate(observed):
                state_set.states.append(State(id=next_id("state"), symbol=str(index), label=value))
            matrix.state_sets.append(state_set)
            char.states = state_set.id
    elif data.kind is DataKind.MOLECULAR:
        observed = _sorted_unique(
            value for cells in cells_by_key.values() for value in cells.values()
        )
        state_set = StateSet(id=next_id("states"))
        for value in observed:
            state_set.states.append(State(id=next_id("state"), symbol=value))
        matrix.state_sets.append(state_set)
        for char in matrix.characters:
            char.states = state_set.id

    for key, cells in cells_by_key.items():
        matrix.rows.append(
            Row(
                id=next_id("row"),
                otu=row_otus[key],
                cells={char_ids[col]: value for col, value in cells.items()},
            )
        )
    return matrix


def _sorted_unique(values: Any) -> list[str]:
    return sorted(set(values))
