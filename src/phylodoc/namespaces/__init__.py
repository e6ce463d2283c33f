"""Namespace prefix bindings."""

from .registry import DEFAULT_NAMESPACES, NEXML_URI, XSI_URI, NamespaceRegistry

__all__ = [
    "DEFAULT_NAMESPACES",
    "NEXML_URI",
    "XSI_URI",
    "NamespaceRegistry",
]
