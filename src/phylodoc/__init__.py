"""phylodoc - build, annotate, query and exchange phylogenetic data documents."""

from .core import (
    Config,
    DanglingReference,
    InvalidStructure,
    MalformedWireFormat,
    NamespaceConflict,
    PhyloDocError,
    UnknownLevel,
    UnknownPrefix,
    UnresolvedNamespace,
    ValidationUnavailable,
)
from .metadata import Annotation, Literal, Resource, meta
from .model import (
    Document,
    MatrixData,
    Tree,
    add_basic_meta,
    add_characters_block,
    add_metadata,
    add_otus_if_absent,
    add_tree_block,
    annotate_identifiers,
    remove_metadata,
)
from .namespaces import NamespaceRegistry
from .projection import (
    get_characters,
    get_characters_list,
    get_metadata,
    get_namespaces,
    get_taxa,
    get_trees,
    get_trees_list,
    summarize,
)
from .wire import decode, encode, publish, read, validate, write

__version__ = "0.1.0"

__all__ = [
    "Annotation",
    "Config",
    "DanglingReference",
    "Document",
    "InvalidStructure",
    "Literal",
    "MalformedWireFormat",
    "MatrixData",
    "NamespaceConflict",
    "NamespaceRegistry",
    "PhyloDocError",
    "Resource",
    "Tree",
    "UnknownLevel",
    "UnknownPrefix",
    "UnresolvedNamespace",
    "ValidationUnavailable",
    "add_basic_meta",
    "add_characters_block",
    "add_metadata",
    "add_otus_if_absent",
    "add_tree_block",
    "annotate_identifiers",
    "decode",
    "encode",
    "get_characters",
    "get_characters_list",
    "get_metadata",
    "get_namespaces",
    "get_taxa",
    "get_trees",
    "get_trees_list",
    "meta",
    "publish",
    "read",
    "remove_metadata",
    "summarize",
    "validate",
    "write",
]
