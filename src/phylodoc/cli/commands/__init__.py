"""Command implementations for the phylodoc CLI."""

from .inspect import (
    add_input_argument,
    handle_characters,
    handle_metadata,
    handle_summary,
    handle_trees,
)
from .validate import handle_validate

__all__ = [
    "add_input_argument",
    "handle_summary",
    "handle_metadata",
    "handle_characters",
    "handle_trees",
    "handle_validate",
]
