"""Metadata annotation model."""

from .annotation import (
    XSD_BOOLEAN,
    XSD_DATE,
    XSD_DATETIME,
    XSD_DECIMAL,
    XSD_DOUBLE,
    XSD_INTEGER,
    XSD_STRING,
    Annotatable,
    Annotation,
    Literal,
    Resource,
    attach,
    check_resolvable,
    find_unresolved,
    meta,
)

__all__ = [
    "Annotatable",
    "Annotation",
    "Literal",
    "Resource",
    "attach",
    "check_resolvable",
    "find_unresolved",
    "meta",
    "XSD_BOOLEAN",
    "XSD_DATE",
    "XSD_DATETIME",
    "XSD_DECIMAL",
    "XSD_DOUBLE",
    "XSD_INTEGER",
    "XSD_STRING",
]
