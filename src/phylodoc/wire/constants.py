"""Element names and type tags of the NeXML wire format."""

from ..model.characters import DataKind
from ..namespaces import NEXML_URI, XSI_URI

ROOT_TAG = "nex:nexml"
XSI_TYPE = "xsi:type"
# Attribute key of xsi:type once parsed by ElementTree
XSI_TYPE_PARSED = f"{{{XSI_URI}}}type"

LITERAL_META = "nex:LiteralMeta"
RESOURCE_META = "nex:ResourceMeta"
FLOAT_TREE = "nex:FloatTree"

CELLS_TYPES: dict[tuple[DataKind, str | None], str] = {
    (DataKind.DISCRETE, None): "nex:StandardCells",
    (DataKind.CONTINUOUS, None): "nex:ContinuousCells",
    (DataKind.MOLECULAR, "dna"): "nex:DnaCells",
    (DataKind.MOLECULAR, "rna"): "nex:RnaCells",
    (DataKind.MOLECULAR, "protein"): "nex:ProteinCells",
}

# Local xsi:type name -> (kind, molecule, uses <seq> rows)
CHARACTERS_KINDS: dict[str, tuple[DataKind, str | None, bool]] = {
    "StandardCells": (DataKind.DISCRETE, None, False),
    "StandardSeqs": (DataKind.DISCRETE, None, True),
    "ContinuousCells": (DataKind.CONTINUOUS, None, False),
    "ContinuousSeqs": (DataKind.CONTINUOUS, None, True),
    "DnaCells": (DataKind.MOLECULAR, "dna", False),
    "DnaSeqs": (DataKind.MOLECULAR, "dna", True),
    "RnaCells": (DataKind.MOLECULAR, "rna", False),
    "RnaSeqs": (DataKind.MOLECULAR, "rna", True),
    "ProteinCells": (DataKind.MOLECULAR, "protein", False),
    "ProteinSeqs": (DataKind.MOLECULAR, "protein", True),
}

STATE_TAGS = frozenset({"state", "polymorphic_state_set", "uncertain_state_set"})

__all__ = [
    "CELLS_TYPES",
    "CHARACTERS_KINDS",
    "FLOAT_TREE",
    "LITERAL_META",
    "NEXML_URI",
    "RESOURCE_META",
    "ROOT_TAG",
    "STATE_TAGS",
    "XSI_TYPE",
    "XSI_TYPE_PARSED",
]
