"""Protocol definitions for external collaborators.

The document model only depends on these interfaces; concrete conversions
to other ecosystems, identifier databases, validation services and
repositories live outside the core.

Protocols:
- TreeAdapter: internal Tree <-> host phylogeny object
- TableAdapter: host table <-> matrix input / projected DataFrame
- IdentifierResolver: taxon label -> candidate identifier URIs
- Validator: encoded document -> ValidationResult
- Publisher: encoded document -> persistent identifier
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    import pandas as pd

    from ..model.characters import MatrixData
    from ..model.trees import Tree
    from ..wire.validation import ValidationResult


@runtime_checkable
class TreeAdapter(Protocol):
    """Translates between Tree and a host ecosystem's phylogeny type.

    Example:
        class NewickAdapter:
            def to_tree(self, obj: str) -> Tree: ...
            def from_tree(self, tree: Tree) -> str: ...
    """

    def to_tree(self, obj: Any) -> Tree:
        """Convert a host object into a Tree suitable for add_tree_block.

        Tips must carry a taxon ``label`` or an ``otu`` reference.
        """
        ...

    def from_tree(self, tree: Tree) -> Any:
        """Convert a Tree into the host object."""
        ...


@runtime_checkable
class TableAdapter(Protocol):
    """Translates between a host tabular type and matrix data."""

    def to_matrix_data(self, table: Any) -> MatrixData:
        """Convert a host table (rows = taxa) into matrix input."""
        ...

    def from_frame(self, frame: pd.DataFrame) -> Any:
        """Convert a projected DataFrame into the host table type."""
        ...


@runtime_checkable
class IdentifierResolver(Protocol):
    """Looks up external identifiers for a taxon label."""

    def resolve(self, label: str) -> Sequence[str]:
        """Get zero, one or many candidate identifier URIs for ``label``."""
        ...


@runtime_checkable
class Validator(Protocol):
    """Validates an encoded document.

    Implementations raise ValidationUnavailable when they cannot reach
    whatever does the validating.
    """

    def validate(self, data: bytes) -> ValidationResult:
        ...


@runtime_checkable
class Publisher(Protocol):
    """Deposits an encoded document in an external repository."""

    def publish(self, data: bytes) -> str:
        """Upload ``data`` and return its persistent identifier."""
        ...
