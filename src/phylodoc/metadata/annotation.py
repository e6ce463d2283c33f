"""Namespace-qualified metadata annotations.

An annotation is a ``prefix:local-name`` property with either a typed
literal value or a resource (URI) value, plus an ordered list of nested
child annotations. Children are owned by their parent, so an annotation
tree never shares nodes and never has cycles.

Construction does not look at namespaces; prefixes are checked when an
annotation is attached to an entity of a document (see ``attach``).

Example:
    creator = meta(
        "dc:creator",
        children=[meta("foaf:name", "Jane Doe"), meta("foaf:mbox", href="mailto:jd@example.org")],
    )
    attach(creator, document, document.namespaces)
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Protocol, Sequence, Union

from ..core.exceptions import UnresolvedNamespace

if TYPE_CHECKING:
    from ..namespaces import NamespaceRegistry


# =============================================================================
# Datatypes
# =============================================================================

XSD_STRING = "xsd:string"
XSD_BOOLEAN = "xsd:boolean"
XSD_INTEGER = "xsd:integer"
XSD_DOUBLE = "xsd:double"
XSD_DECIMAL = "xsd:decimal"
XSD_DATE = "xsd:date"
XSD_DATETIME = "xsd:dateTime"

_INTEGER_TYPES = frozenset(
    {
        "integer",
        "int",
        "long",
        "short",
        "byte",
        "nonNegativeInteger",
        "positiveInteger",
        "nonPositiveInteger",
        "negativeInteger",
        "unsignedInt",
        "unsignedLong",
    }
)
_FLOAT_TYPES = frozenset({"double", "float"})

# Characters outside the XML 1.0 Char production
_NOT_XML_CHAR_RE = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _local_datatype(datatype: str) -> str:
    """Strip an ``xsd:`` prefix or XML Schema URI from a datatype name."""
    for sep in ("#", ":"):
        if sep in datatype:
            return datatype.rsplit(sep, 1)[1]
    return datatype


# =============================================================================
# Values
# =============================================================================


@dataclass(frozen=True)
class Literal:
    """A typed literal value.

    Attributes:
        value: Python value (str, int, float, Decimal, bool, date, datetime).
        datatype: Declared xsd datatype, e.g. "xsd:string".
    """

    value: Any
    datatype: str = XSD_STRING

    def __post_init__(self) -> None:
        if isinstance(self.value, str) and _NOT_XML_CHAR_RE.search(self.value):
            raise ValueError(f"Literal contains characters XML cannot carry: {self.value!r}")

    @classmethod
    def of(cls, value: Any, datatype: str | None = None) -> "Literal":
        """Build a literal, inferring the datatype from the Python type."""
        if isinstance(value, Literal):
            return value
        if datatype is not None:
            # Canonicalise so the value matches what a round trip produces
            return cls.parse(cls(value, datatype).lexical(), datatype)
        if isinstance(value, bool):
            return cls(value, XSD_BOOLEAN)
        if isinstance(value, int):
            return cls(value, XSD_INTEGER)
        if isinstance(value, float):
            return cls(value, XSD_DOUBLE)
        if isinstance(value, Decimal):
            return cls(value, XSD_DECIMAL)
        if isinstance(value, datetime):
            return cls(value, XSD_DATETIME)
        if isinstance(value, date):
            return cls(value, XSD_DATE)
        return cls(str(value), XSD_STRING)

    @classmethod
    def parse(cls, text: str, datatype: str | None = None) -> "Literal":
        """Rebuild a literal from its lexical form.

        Unrecognised datatypes keep the text as-is together with the
        declared datatype.

        Raises:
            ValueError: If the text is not valid for the datatype.
        """
        datatype = datatype or XSD_STRING
        local = _local_datatype(datatype)

        if local == "boolean":
            lowered = text.strip().lower()
            if lowered not in {"true", "false", "1", "0"}:
                raise ValueError(f"Invalid boolean literal: {text!r}")
            return cls(lowered in {"true", "1"}, datatype)
        if local in _INTEGER_TYPES:
            return cls(int(text), datatype)
        if local in _FLOAT_TYPES:
            return cls(float(text), datatype)
        if local == "decimal":
            try:
                return cls(Decimal(text.strip()), datatype)
            except InvalidOperation:
                raise ValueError(f"Invalid decimal literal: {text!r}") from None
        if local == "date":
            return cls(date.fromisoformat(text.strip()), datatype)
        if local == "dateTime":
            return cls(datetime.fromisoformat(text.strip()), datatype)
        return cls(text, datatype)

    def lexical(self) -> str:
        """Get the wire representation of the value."""
        value = self.value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            return repr(value)
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return str(value)


@dataclass(frozen=True)
class Resource:
    """A resource value: a URI, or None for a blank node carrying children."""

    href: str | None = None


Value = Union[Literal, Resource]


# =============================================================================
# Annotation
# =============================================================================


@dataclass
class Annotation:
    """A property/value pair with nested child annotations.

    Attributes:
        property: Qualified property name ("prefix:local-name").
        value: Literal or Resource.
        children: Nested annotations, exclusively owned by this one.
    """

    property: str
    value: Value = field(default_factory=Resource)
    children: list[Annotation] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.value, (Literal, Resource)):
            self.value = Literal.of(self.value)
        self.children = list(self.children)

    @property
    def prefix(self) -> str:
        """Prefix part of the property, "" when unqualified."""
        prefix, sep, _ = self.property.partition(":")
        return prefix if sep else ""

    @property
    def local_name(self) -> str:
        return self.property.partition(":")[2] or self.property

    @property
    def is_literal(self) -> bool:
        return isinstance(self.value, Literal)

    @property
    def is_resource(self) -> bool:
        return isinstance(self.value, Resource)

    @property
    def content(self) -> Any:
        """Literal value, or None for resources."""
        return self.value.value if isinstance(self.value, Literal) else None

    @property
    def href(self) -> str | None:
        """Resource URI, or None for literals and blank nodes."""
        return self.value.href if isinstance(self.value, Resource) else None

    def walk(self) -> Iterator[Annotation]:
        """Iterate over this annotation and all descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def copy(self) -> Annotation:
        """Get a deep, independent copy of the annotation tree."""
        return copy.deepcopy(self)


def meta(
    property: str,
    content: Any = None,
    *,
    href: str | None = None,
    datatype: str | None = None,
    children: Iterable[Annotation] | None = None,
) -> Annotation:
    """Build an annotation.

    Passing ``content`` makes a literal annotation (datatype inferred unless
    given); otherwise the annotation is a resource pointing at ``href``.

    Example:
        meta("dc:title", "Primate phylogeny")
        meta("dcterms:modified", date(2024, 1, 5))
        meta("cc:license", href="https://creativecommons.org/publicdomain/zero/1.0/")
    """
    if content is not None and href is not None:
        raise ValueError("An annotation holds either content or href, not both")

    value: Value
    if content is not None:
        value = Literal.of(content, datatype)
    else:
        value = Resource(href)
    return Annotation(property, value, list(children or []))


# =============================================================================
# Attachment
# =============================================================================


class Annotatable(Protocol):
    """Anything carrying an ordered list of annotations."""

    meta: list[Annotation]


def find_unresolved(annotation: Annotation, registry: NamespaceRegistry) -> Annotation | None:
    """Get the first annotation (pre-order) whose prefix is not registered."""
    for node in annotation.walk():
        if not node.prefix or node.prefix not in registry:
            return node
    return None


def check_resolvable(
    annotations: Iterable[Annotation], registry: NamespaceRegistry
) -> None:
    """Check every prefix of every annotation tree.

    Raises:
        UnresolvedNamespace: Naming the first unresolvable prefix.
    """
    for annotation in annotations:
        bad = find_unresolved(annotation, registry)
        if bad is not None:
            raise UnresolvedNamespace(bad.prefix, bad.property)


def attach(
    annotation: Annotation | Sequence[Annotation],
    target: Annotatable,
    registry: NamespaceRegistry,
) -> None:
    """Attach annotations to a target after resolving all their prefixes.

    The target receives independent copies. Equal annotations attached twice
    are stored twice; nothing is merged or deduplicated.

    Raises:
        UnresolvedNamespace: If any prefix is unbound; the target is unchanged.
    """
    annotations = [annotation] if isinstance(annotation, Annotation) else list(annotation)
    check_resolvable(annotations, registry)
    target.meta.extend(a.copy() for a in annotations)
