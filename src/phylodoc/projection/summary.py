"""Document summaries: taxa table, entity counts, namespaces."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from ..model.document import LEVELS, Document


@dataclass
class DocumentSummary:
    """Counts of the entities in a document."""

    otu_blocks: int = 0
    otus: int = 0
    tree_blocks: int = 0
    trees: int = 0
    nodes: int = 0
    edges: int = 0
    characters_blocks: int = 0
    matrices: int = 0
    characters: int = 0
    rows: int = 0
    annotations: int = 0
    namespaces: int = 0


def summarize(document: Document) -> DocumentSummary:
    """Count the entities and top-level annotations of a document."""
    annotations = sum(
        len(entity.meta) for level in LEVELS for _, entity in document.entities(level)
    )
    return DocumentSummary(
        otu_blocks=len(document.otus),
        otus=len(document.entities("otus/otu")),
        tree_blocks=len(document.trees),
        trees=len(document.entities("trees/tree")),
        nodes=len(document.entities("trees/tree/node")),
        edges=len(document.entities("trees/tree/edge")),
        characters_blocks=len(document.characters),
        matrices=len(document.entities("characters")),
        characters=len(document.entities("characters/format/char")),
        rows=len(document.entities("characters/matrix/row")),
        annotations=annotations,
        namespaces=len(document.namespaces),
    )


def get_taxa(document: Document) -> pd.DataFrame:
    """Get every OTU as a row with its block id, OTU id and label."""
    records = [
        {"otus": block.id, "otu": otu.id, "label": otu.label}
        for block in document.otus
        for otu in block.otus
    ]
    return pd.DataFrame(records, columns=["otus", "otu", "label"], dtype=object)


def get_namespaces(document: Document) -> dict[str, str]:
    """Get the document's prefix bindings in registration order."""
    return document.namespaces.snapshot()


def otu_labels(document: Document) -> dict[str, str | None]:
    """Map every OTU id to its label."""
    return {otu.id: otu.label for block in document.otus for otu in block.otus}
