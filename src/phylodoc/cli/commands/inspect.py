"""Read-only inspection commands: summary, metadata, characters, trees."""

from __future__ import annotations

import pandas as pd

from ...adapters import NewickAdapter
from ...core.config import Config
from ...model.document import LEVELS
from ...projection import (
    get_characters_list,
    get_metadata,
    get_namespaces,
    get_trees_list,
    otu_labels,
    summarize,
)
from ...wire import read


def add_input_argument(parser) -> None:
    """Add the positional document path."""
    parser.add_argument("path", help="NeXML document to read")


def handle_summary(args, config: Config) -> None:
    """Print entity counts and namespace bindings."""
    document = read(args.path)
    summary = summarize(document)

    print(f"Document: {args.path}")
    print("=" * 50)
    print(f"OTU blocks: {summary.otu_blocks} ({summary.otus} OTUs)")
    print(f"Tree blocks: {summary.tree_blocks} ({summary.trees} trees)")
    print(f"Characters blocks: {summary.characters_blocks} ({summary.matrices} matrices)")
    print(f"Characters: {summary.characters}, rows: {summary.rows}")
    print(f"Annotations: {summary.annotations}")
    print()
    print("Namespaces:")
    for prefix, uri in get_namespaces(document).items():
        print(f"  {prefix}: {uri}")


def handle_metadata(args, config: Config) -> None:
    """Print the annotations of one level (or every level) as tables."""
    document = read(args.path)
    if args.level != "all":
        _print_frame(get_metadata(document, args.level), args.csv)
        return
    for level in LEVELS:
        frame = get_metadata(document, level)
        if frame.columns.empty:
            continue
        print(f"[{level}]")
        _print_frame(frame, args.csv)
        print()


def handle_characters(args, config: Config) -> None:
    """Print one table per OTU block."""
    document = read(args.path)
    tables = get_characters_list(document, rownames_as_column=args.rownames_as_column)
    if not tables:
        print("No character data.")
        return
    for otus_id, frame in tables.items():
        if len(tables) > 1:
            print(f"[{otus_id}]")
        _print_frame(frame, args.csv)


def handle_trees(args, config: Config) -> None:
    """Print every tree as Newick, one per line."""
    document = read(args.path)
    adapter = NewickAdapter(otu_labels(document))
    for block in get_trees_list(document, adapter):
        for newick in block:
            print(newick)


def _print_frame(frame: pd.DataFrame, csv: bool) -> None:
    if csv:
        print(frame.to_csv(), end="")
    else:
        print(frame.to_string())
