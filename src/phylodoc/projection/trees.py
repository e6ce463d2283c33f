"""Tree projections.

``get_trees`` returns the most specific shape for interactive use, tagged
so callers can tell which one they got; ``get_trees_list`` always returns
a list of blocks, each a list of trees. Both hand out copies (or adapter
outputs), never the document's own Tree objects.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..model.document import Document

if TYPE_CHECKING:
    from ..adapters.protocols import TreeAdapter


class TreeShape(str, Enum):
    """Shape of a ``get_trees`` result."""

    SINGLE = "single"
    LIST = "list"
    NESTED = "nested"


@dataclass(frozen=True)
class TreesView:
    """Trees in the most specific shape.

    Attributes:
        shape: SINGLE (one block, one tree), LIST (one block) or NESTED
            (zero or several blocks).
        blocks: The uniform nested list, whatever the shape.
    """

    shape: TreeShape
    blocks: list[list[Any]]

    @property
    def value(self) -> Any:
        """The tree, the list of trees, or the list of lists."""
        if self.shape is TreeShape.SINGLE:
            return self.blocks[0][0]
        if self.shape is TreeShape.LIST:
            return self.blocks[0]
        return self.blocks


def get_trees_list(document: Document, adapter: TreeAdapter | None = None) -> list[list[Any]]:
    """Get all trees as a list of tree blocks, each a list of trees."""
    return [
        [
            adapter.from_tree(copy.deepcopy(tree)) if adapter is not None else copy.deepcopy(tree)
            for tree in block.trees
        ]
        for block in document.trees
    ]


def get_trees(document: Document, adapter: TreeAdapter | None = None) -> TreesView:
    """Get all trees in the most specific shape."""
    blocks = get_trees_list(document, adapter)
    if len(blocks) == 1 and len(blocks[0]) == 1:
        shape = TreeShape.SINGLE
    elif len(blocks) == 1:
        shape = TreeShape.LIST
    else:
        shape = TreeShape.NESTED
    return TreesView(shape, blocks)
