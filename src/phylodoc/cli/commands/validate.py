"""Validate command."""

import sys
from pathlib import Path

from ...core.config import Config
from ...wire import validate


def handle_validate(args, config: Config) -> None:
    """Validate a document; exits with status 1 when it is invalid.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    if args.offline:
        config.validation.enabled = False

    result = validate(Path(args.path).read_bytes(), config=config)
    status = "valid" if result.valid else "INVALID"
    print(f"{args.path}: {status} ({result.source} check)")
    for message in result.messages:
        print(f"  - {message}")

    if not result.valid:
        sys.exit(1)
