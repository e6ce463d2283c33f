"""Interfaces to external collaborators and the Newick tree adapter."""

from .newick import NewickAdapter
from .protocols import (
    IdentifierResolver,
    Publisher,
    TableAdapter,
    TreeAdapter,
    Validator,
)

__all__ = [
    "IdentifierResolver",
    "NewickAdapter",
    "Publisher",
    "TableAdapter",
    "TreeAdapter",
    "Validator",
]
