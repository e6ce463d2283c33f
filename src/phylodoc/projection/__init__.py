"""Flat views of a document: metadata tables, character tables, tree lists."""

from .characters import TAXA_COLUMN, get_characters, get_characters_list
from .metadata import get_metadata
from .summary import DocumentSummary, get_namespaces, get_taxa, otu_labels, summarize
from .trees import TreeShape, TreesView, get_trees, get_trees_list

__all__ = [
    "DocumentSummary",
    "TAXA_COLUMN",
    "TreeShape",
    "TreesView",
    "get_characters",
    "get_characters_list",
    "get_metadata",
    "get_namespaces",
    "get_taxa",
    "get_trees",
    "get_trees_list",
    "otu_labels",
    "summarize",
]
