"""Operational taxonomic units and OTU blocks."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..metadata import Annotation


@dataclass
class OTU:
    """A labelled taxon referenced by tree tips and matrix rows."""

    id: str
    label: str | None = None
    meta: list[Annotation] = field(default_factory=list)


@dataclass
class OTUBlock:
    """An ordered set of OTUs sharing one identifier space.

    Attributes:
        id: Block identifier.
        otus: OTUs in declaration order.
        label: Optional block label.
        meta: Block-level annotations.
    """

    id: str
    otus: list[OTU] = field(default_factory=list)
    label: str | None = None
    meta: list[Annotation] = field(default_factory=list)

    @property
    def otu_ids(self) -> set[str]:
        return {otu.id for otu in self.otus}

    @property
    def label_set(self) -> frozenset[str | None]:
        """Taxon labels as a set; the key used to decide block reuse."""
        return frozenset(otu.label for otu in self.otus)

    def get(self, otu_id: str) -> OTU | None:
        for otu in self.otus:
            if otu.id == otu_id:
                return otu
        return None

    def by_label(self) -> dict[str, str]:
        """Map taxon label to OTU id (first OTU wins for repeated labels)."""
        index: dict[str, str] = {}
        for otu in self.otus:
            if otu.label is not None:
                index.setdefault(otu.label, otu.id)
        return index
