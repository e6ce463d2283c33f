"""Metadata tables.

``get_metadata`` flattens the annotations of every entity at one level into
a wide DataFrame: one row per entity (index ``id``), one column per
qualified property seen at that level. Nested annotations become path
columns (``"dc:creator/foaf:name"``). Literal annotations contribute their
Python value and resource annotations their URI; a property repeated on the
same entity yields a list. Entities lacking a property hold ``None``.
"""

from __future__ import annotations

from typing import Any

import pandas as pd

from ..metadata import Annotation
from ..model.document import LEVELS, Document


def _flatten(annotation: Annotation, path: str, record: dict[str, Any]) -> None:
    key = f"{path}{annotation.property}"
    value = annotation.content if annotation.is_literal else annotation.href
    if value is not None or not annotation.children:
        if key in record:
            previous = record[key]
            record[key] = (previous if isinstance(previous, list) else [previous]) + [value]
        else:
            record[key] = value
    for child in annotation.children:
        _flatten(child, f"{key}/", record)


def get_metadata(
    document: Document, level: str = "document"
) -> pd.DataFrame | dict[str, list[Annotation]]:
    """Project the annotations at a level into a table.

    Args:
        document: Document to read.
        level: Entity level (see ``phylodoc.model.LEVELS``), or "all" for
            the raw annotations of every annotated entity.

    Returns:
        A wide DataFrame for a single level. For "all", a dict from entity
        id to copies of its annotations; the document root is keyed
        "document". Ids are unique per entity kind, so should two kinds share
        an id their annotations are listed under that id in level order.

    Raises:
        UnknownLevel: If the level is not known.
    """
    if level == "all":
        raw: dict[str, list[Annotation]] = {}
        for each in LEVELS:
            for entity_id, entity in document.entities(each):
                if entity.meta:
                    raw.setdefault(entity_id, []).extend(a.copy() for a in entity.meta)
        return raw

    entities = document.entities(level)
    records: list[dict[str, Any]] = []
    columns: dict[str, None] = {}
    for _, entity in entities:
        record: dict[str, Any] = {}
        for annotation in entity.meta:
            _flatten(annotation, "", record)
        for key in record:
            columns.setdefault(key, None)
        records.append(record)

    data = {column: [record.get(column) for record in records] for column in columns}
    index = pd.Index([entity_id for entity_id, _ in entities], name="id", dtype=object)
    return pd.DataFrame(data, index=index, columns=list(columns), dtype=object)
