"""Deposit a document with an external repository."""

from __future__ import annotations

from loguru import logger

from ..adapters.protocols import Publisher
from ..core.config import Config
from ..model.document import Document
from .encoder import encode


def publish(document: Document, publisher: Publisher, config: Config | None = None) -> str:
    """Encode ``document`` and hand it to ``publisher``.

    Args:
        document: Document to deposit.
        publisher: Repository client.
        config: Configuration; loaded from the environment when omitted.

    Returns:
        The identifier the repository assigned.
    """
    config = config or Config.from_env()
    data = encode(document, config.writer)
    identifier = publisher.publish(data)
    logger.info(f"Published document ({len(data)} bytes) as {identifier}")
    return identifier
