"""Namespace registry for prefix to URI bindings.

Every document owns one registry. Annotation properties are written as
``prefix:local-name`` and the registry is what turns the prefix into the
vocabulary URI. Bindings are append-only: once declared, a prefix stays bound
for the life of the document, matching the wire format where declarations sit
on the root element.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Iterator, Mapping

from ..core.exceptions import NamespaceConflict, UnknownPrefix


# =============================================================================
# Built-in Bindings
# =============================================================================

NEXML_URI = "http://www.nexml.org/2009"
XSI_URI = "http://www.w3.org/2001/XMLSchema-instance"

# Copied into every new registry; never mutated.
DEFAULT_NAMESPACES: Mapping[str, str] = MappingProxyType(
    {
        "nex": NEXML_URI,
        "xsi": XSI_URI,
        "xsd": "http://www.w3.org/2001/XMLSchema#",
        "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
        "dc": "http://purl.org/dc/elements/1.1/",
        "dcterms": "http://purl.org/dc/terms/",
        "prism": "http://prismstandard.org/namespaces/1.2/basic/",
        "cc": "http://creativecommons.org/ns#",
        "ncbi": "http://www.ncbi.nlm.nih.gov/taxonomy#",
        "tc": "http://rs.tdwg.org/ontology/voc/TaxonConcept#",
        "cdao": "http://purl.obolibrary.org/obo/",
        "skos": "http://www.w3.org/2004/02/skos/core#",
        "foaf": "http://xmlns.com/foaf/0.1/",
    }
)

# XML NCName: no colon, no leading digit or punctuation
_PREFIX_RE = re.compile(r"[^\W\d][\w.-]*")
RESERVED_PREFIXES = frozenset({"xml", "xmlns"})


# =============================================================================
# Registry Implementation
# =============================================================================


class NamespaceRegistry:
    """Ordered prefix to URI bindings for one document.

    Example:
        registry = NamespaceRegistry()
        registry.register("obo", "http://purl.obolibrary.org/obo/")
        registry.register("obo", "http://purl.obolibrary.org/obo/")  # no-op
        registry.resolve("dc")  # "http://purl.org/dc/elements/1.1/"

        registry.register("dc", "http://example.org/dc#")  # NamespaceConflict
    """

    def __init__(
        self,
        bindings: Mapping[str, str] | None = None,
        *,
        defaults: bool = True,
    ) -> None:
        """Initialize the registry.

        Args:
            bindings: Extra bindings registered after the built-ins.
            defaults: Whether to preload DEFAULT_NAMESPACES.

        Raises:
            NamespaceConflict: If ``bindings`` rebinds a built-in prefix.
        """
        self._bindings: dict[str, str] = dict(DEFAULT_NAMESPACES) if defaults else {}
        if bindings:
            self.register_all(bindings)

    def register(self, prefix: str, uri: str) -> None:
        """Bind a prefix to a URI.

        Re-registering a prefix with the URI it already has is a no-op.

        Args:
            prefix: Short prefix used in qualified names.
            uri: Vocabulary URI.

        Raises:
            NamespaceConflict: If the prefix is bound to a different URI.
        """
        self._check(prefix, uri)
        self._bindings.setdefault(prefix, uri)

    def register_all(self, bindings: Mapping[str, str]) -> None:
        """Register several bindings atomically.

        Every binding is checked before any is inserted, so a conflict leaves
        the registry unchanged.

        Raises:
            NamespaceConflict: On the first conflicting binding.
        """
        pending: dict[str, str] = {}
        for prefix, uri in bindings.items():
            self._check(prefix, uri)
            if prefix in pending and pending[prefix] != uri:
                raise NamespaceConflict(prefix, pending[prefix], uri)
            pending[prefix] = uri
        for prefix, uri in pending.items():
            self._bindings.setdefault(prefix, uri)

    def resolve(self, prefix: str) -> str:
        """Get the URI bound to a prefix.

        Raises:
            UnknownPrefix: If the prefix is not bound.
        """
        try:
            return self._bindings[prefix]
        except KeyError:
            raise UnknownPrefix(prefix) from None

    def snapshot(self) -> dict[str, str]:
        """Get all bindings in registration order, built-ins first."""
        return dict(self._bindings)

    def copy(self) -> "NamespaceRegistry":
        """Get an independent registry with the same bindings."""
        clone = NamespaceRegistry(defaults=False)
        clone._bindings = dict(self._bindings)
        return clone

    def _check(self, prefix: str, uri: str) -> None:
        if not _PREFIX_RE.fullmatch(prefix) or prefix.lower() in RESERVED_PREFIXES:
            raise ValueError(f"Invalid namespace prefix: '{prefix}'")
        existing = self._bindings.get(prefix)
        if existing is not None and existing != uri:
            raise NamespaceConflict(prefix, existing, uri)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamespaceRegistry):
            return NotImplemented
        return list(self._bindings.items()) == list(other._bindings.items())

    def __repr__(self) -> str:
        return f"NamespaceRegistry({len(self._bindings)} bindings)"
