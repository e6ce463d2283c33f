"""Character matrix tables and the merge policy.

Matrices are grouped by the OTU block of their characters block. Within a
group, every matrix (whatever its data kind) is joined column-wise on the
OTU id, producing one wide table. Groups over different OTU blocks are
never joined: each stays its own table, so rows of unrelated taxon sets are
never aligned or padded against each other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pandas as pd

from ..model.characters import DataKind, Matrix
from ..model.document import Document
from ..model.otus import OTUBlock

if TYPE_CHECKING:
    from ..adapters.protocols import TableAdapter


TAXA_COLUMN = "taxa"


def _merge_group(otu_block: OTUBlock, matrices: list[Matrix], rownames_as_column: bool) -> pd.DataFrame:
    present: set[str] = {row.otu for matrix in matrices for row in matrix.rows}
    otus = [otu for otu in otu_block.otus if otu.id in present]

    labels = [otu.label if otu.label is not None else otu.id for otu in otus]
    columns: dict[str, Any] = {}
    for matrix in matrices:
        rows: dict[str, dict[str, Any]] = {}
        for row in matrix.rows:
            rows[row.otu] = row.cells
        dtype = "float64" if matrix.kind is DataKind.CONTINUOUS else object
        for char in matrix.characters:
            name = char.name if char.name not in columns else char.id
            values = [rows.get(otu.id, {}).get(char.id) for otu in otus]
            columns[name] = pd.Series(values, dtype=dtype).to_numpy()

    frame = pd.DataFrame(columns, index=pd.Index(labels, name=TAXA_COLUMN, dtype=object))

    if rownames_as_column:
        frame = frame.reset_index()
    return frame


def get_characters_list(
    document: Document,
    rownames_as_column: bool = False,
    *,
    adapter: TableAdapter | None = None,
) -> dict[str, Any]:
    """Get one merged table per OTU block that has character data.

    Args:
        document: Document to read.
        rownames_as_column: Put taxon labels in a "taxa" column instead of
            the index.
        adapter: Optional TableAdapter applied to each table.

    Returns:
        Dict from OTU block id to table, in characters block order.
    """
    groups: dict[str, list[Matrix]] = {}
    for block in document.characters:
        groups.setdefault(block.otus, []).extend(block.matrices)

    tables: dict[str, Any] = {}
    for otus_id, matrices in groups.items():
        otu_block = document.get_otu_block(otus_id)
        if otu_block is None:
            continue
        frame = _merge_group(otu_block, matrices, rownames_as_column)
        tables[otus_id] = adapter.from_frame(frame) if adapter is not None else frame
    return tables


def get_characters(
    document: Document,
    rownames_as_column: bool = False,
    *,
    adapter: TableAdapter | None = None,
) -> Any:
    """Get character data as a table, or one table per OTU block.

    Returns:
        The table itself when all character data shares one OTU block,
        otherwise the dict returned by ``get_characters_list``.
    """
    tables = get_characters_list(document, rownames_as_column, adapter=adapter)
    if len(tables) == 1:
        return next(iter(tables.values()))
    return tables
