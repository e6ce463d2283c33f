"""Custom exceptions for phylodoc."""


class PhyloDocError(Exception):
    """Base exception for all phylodoc errors."""

    pass


# =============================================================================
# Namespaces
# =============================================================================


class NamespaceError(PhyloDocError):
    """Namespace registry operation failed."""

    pass


class NamespaceConflict(NamespaceError):
    """A prefix is already bound to a different URI."""

    def __init__(self, prefix: str, existing: str, uri: str):
        """Initialize exception with the conflicting binding.

        Args:
            prefix: Prefix being registered.
            existing: URI the prefix is already bound to.
            uri: URI the caller tried to bind.
        """
        self.prefix = prefix
        self.existing = existing
        self.uri = uri
        super().__init__(
            f"Namespace prefix '{prefix}' is already bound to {existing}, "
            f"cannot rebind to {uri}"
        )


class UnknownPrefix(NamespaceError, KeyError):
    """Prefix is not bound in the registry."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(prefix)

    def __str__(self) -> str:
        return f"Unknown namespace prefix: '{self.prefix}'"


class UnresolvedNamespace(NamespaceError):
    """An annotation uses a prefix the document does not declare."""

    def __init__(self, prefix: str, property: str):
        """Initialize exception with the first unresolvable prefix.

        Args:
            prefix: The prefix that failed to resolve ("" for unqualified).
            property: The annotation property carrying that prefix.
        """
        self.prefix = prefix
        self.property = property
        super().__init__(
            f"Unresolved namespace prefix '{prefix}' in property '{property}'"
        )


# =============================================================================
# Document model
# =============================================================================


class DocumentError(PhyloDocError):
    """Document model operation failed."""

    pass


class DanglingReference(DocumentError):
    """A reference points outside the entities it must resolve against."""

    def __init__(self, identifier: str, context: str | None = None):
        self.identifier = identifier
        self.context = context
        message = f"Dangling reference: {identifier}"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


class InvalidStructure(DocumentError):
    """Tree or matrix input is structurally invalid."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Invalid structure at '{identifier}': {reason}")


class UnknownLevel(PhyloDocError, ValueError):
    """Requested entity level does not exist."""

    def __init__(self, level: str, known: list[str] | None = None):
        self.level = level
        self.known = known or []
        message = f"Unknown level: '{level}'"
        if self.known:
            message = f"{message} (expected one of: {', '.join(self.known)})"
        super().__init__(message)


# =============================================================================
# Wire format
# =============================================================================


class WireFormatError(PhyloDocError):
    """Serialization or validation failed."""

    pass


class MalformedWireFormat(WireFormatError):
    """Input cannot be decoded into a structurally valid document."""

    def __init__(self, reason: str, identifier: str | None = None):
        self.reason = reason
        self.identifier = identifier
        if identifier:
            super().__init__(f"Malformed document at '{identifier}': {reason}")
        else:
            super().__init__(f"Malformed document: {reason}")


class ValidationUnavailable(WireFormatError):
    """The remote validation service could not be reached."""

    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Validator unavailable at {endpoint}: {reason}")
