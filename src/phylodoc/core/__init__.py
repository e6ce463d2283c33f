"""Core configuration and error types for phylodoc."""

from .config import Config, ValidationConfig, WriterConfig
from .exceptions import (
    DanglingReference,
    DocumentError,
    InvalidStructure,
    MalformedWireFormat,
    NamespaceConflict,
    NamespaceError,
    PhyloDocError,
    UnknownLevel,
    UnknownPrefix,
    UnresolvedNamespace,
    ValidationUnavailable,
    WireFormatError,
)

__all__ = [
    "Config",
    "ValidationConfig",
    "WriterConfig",
    "PhyloDocError",
    "NamespaceError",
    "NamespaceConflict",
    "UnknownPrefix",
    "UnresolvedNamespace",
    "DocumentError",
    "DanglingReference",
    "InvalidStructure",
    "UnknownLevel",
    "WireFormatError",
    "MalformedWireFormat",
    "ValidationUnavailable",
]
