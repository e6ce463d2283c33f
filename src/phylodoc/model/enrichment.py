"""Convenience metadata: bibliographic basics and external taxon identifiers."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from loguru import logger

from ..metadata import Annotation, check_resolvable, meta
from .document import Document
from .operations import add_metadata

if TYPE_CHECKING:
    from ..adapters.protocols import IdentifierResolver


CC0_LICENSE = "http://creativecommons.org/publicdomain/zero/1.0/"


def add_basic_meta(
    document: Document | None = None,
    *,
    title: str | None = None,
    description: str | None = None,
    creator: str | None = None,
    pubdate: date | str | None = None,
    rights: str | None = CC0_LICENSE,
    publisher: str | None = None,
    citation: str | None = None,
) -> Document:
    """Add Dublin Core and Creative Commons metadata at the document root.

    Args:
        document: Document to annotate; a new one is created when omitted.
        title: dc:title.
        description: dc:description.
        creator: dc:creator.
        pubdate: dc:date; defaults to today.
        rights: License URI as a cc:license resource; CC0 by default,
            pass None to omit.
        publisher: dc:publisher.
        citation: dcterms:bibliographicCitation.

    Returns:
        The document.
    """
    annotations: list[Annotation] = []
    if title is not None:
        annotations.append(meta("dc:title", title))
    if description is not None:
        annotations.append(meta("dc:description", description))
    if creator is not None:
        annotations.append(meta("dc:creator", creator))
    annotations.append(meta("dc:date", pubdate if pubdate is not None else date.today()))
    if rights is not None:
        annotations.append(meta("cc:license", href=rights))
    if publisher is not None:
        annotations.append(meta("dc:publisher", publisher))
    if citation is not None:
        annotations.append(meta("dcterms:bibliographicCitation", citation))

    return add_metadata(annotations, document)


def annotate_identifiers(
    document: Document,
    resolver: IdentifierResolver,
    property: str = "tc:toTaxon",
) -> int:
    """Attach external taxon identifiers to every labelled OTU.

    Each candidate URI returned by the resolver becomes one resource
    annotation on the OTU. Resolution runs for all OTUs before anything is
    attached, so a failing resolver leaves the document unchanged.

    Returns:
        Number of annotations attached.
    """
    check_resolvable([meta(property)], document.namespaces)

    pending: list[tuple[list[Annotation], Annotation]] = []
    for block in document.otus:
        for otu in block.otus:
            if otu.label is None:
                continue
            candidates = list(resolver.resolve(otu.label))
            if not candidates:
                logger.debug(f"No identifiers found for '{otu.label}'")
            for uri in candidates:
                pending.append((otu.meta, meta(property, href=uri)))

    for target, annotation in pending:
        target.append(annotation)
    logger.debug(f"Attached {len(pending)} identifier annotations")
    return len(pending)
