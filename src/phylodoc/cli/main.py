"""CLI entry point for phylodoc."""

import argparse
import sys
from typing import NoReturn

from loguru import logger

from ..core.config import Config
from ..core.exceptions import PhyloDocError
from ..model.document import LEVELS
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="phylodoc",
        description="Inspect and validate NeXML phylogenetic data documents",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-c", "--config", help="TOML configuration file")

    subparsers = parser.add_subparsers(dest="command", required=False)

    summary_parser = subparsers.add_parser("summary", help="Show entity counts and namespaces")
    commands.add_input_argument(summary_parser)

    metadata_parser = subparsers.add_parser("metadata", help="Show annotations as a table")
    commands.add_input_argument(metadata_parser)
    metadata_parser.add_argument(
        "-l",
        "--level",
        default="document",
        choices=[*LEVELS, "nexml", "all"],
        help="Entity level to read annotations from (default: document)",
    )
    metadata_parser.add_argument("--csv", action="store_true", help="Output CSV")

    characters_parser = subparsers.add_parser("characters", help="Show character matrices")
    commands.add_input_argument(characters_parser)
    characters_parser.add_argument(
        "--rownames-as-column",
        action="store_true",
        help="Put taxon labels in a 'taxa' column instead of the index",
    )
    characters_parser.add_argument("--csv", action="store_true", help="Output CSV")

    trees_parser = subparsers.add_parser("trees", help="Print trees as Newick")
    commands.add_input_argument(trees_parser)

    validate_parser = subparsers.add_parser("validate", help="Validate a document")
    commands.add_input_argument(validate_parser)
    validate_parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the remote validator and run the local check only",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    """Send log output to stderr at INFO, or DEBUG when verbose."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = Config.from_env_or_file(args.config)
        if args.command == "summary":
            commands.handle_summary(args, config)
        elif args.command == "metadata":
            commands.handle_metadata(args, config)
        elif args.command == "characters":
            commands.handle_characters(args, config)
        elif args.command == "trees":
            commands.handle_trees(args, config)
        elif args.command == "validate":
            commands.handle_validate(args, config)
        else:
            parser.print_help()

        sys.exit(0)
    except (PhyloDocError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
