"""Document object model and the operations that build it."""

from .characters import (
    Character,
    CharactersBlock,
    DataKind,
    Matrix,
    MatrixData,
    Row,
    State,
    StateSet,
)
from .document import LEVELS, ROOT_ID, Document, IdAllocator, normalize_level
from .enrichment import CC0_LICENSE, add_basic_meta, annotate_identifiers
from .operations import (
    add_characters_block,
    add_metadata,
    add_otus_if_absent,
    add_tree_block,
    remove_metadata,
)
from .otus import OTU, OTUBlock
from .trees import Edge, Node, Tree, TreeBlock

__all__ = [
    # Entities
    "Character",
    "CharactersBlock",
    "DataKind",
    "Document",
    "Edge",
    "IdAllocator",
    "Matrix",
    "MatrixData",
    "Node",
    "OTU",
    "OTUBlock",
    "Row",
    "State",
    "StateSet",
    "Tree",
    "TreeBlock",
    # Levels
    "LEVELS",
    "ROOT_ID",
    "normalize_level",
    # Operations
    "add_characters_block",
    "add_metadata",
    "add_otus_if_absent",
    "add_tree_block",
    "remove_metadata",
    "add_basic_meta",
    "annotate_identifiers",
    "CC0_LICENSE",
]
