"""NeXML serialization, validation and publishing."""

from .decoder import decode, read
from .encoder import build_tree, encode, write
from .publishing import publish
from .schema import check_structure
from .validation import LocalSchemaValidator, RemoteValidator, ValidationResult, validate

__all__ = [
    "LocalSchemaValidator",
    "RemoteValidator",
    "ValidationResult",
    "build_tree",
    "check_structure",
    "decode",
    "encode",
    "publish",
    "read",
    "validate",
    "write",
]
