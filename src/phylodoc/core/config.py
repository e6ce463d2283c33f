"""Configuration management for phylodoc."""

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any


@dataclass
class WriterConfig:
    """Wire format writer configuration."""

    version: str = "0.9"
    generator: str = "phylodoc"
    # Indent output; whitespace-only literal values do not survive indentation
    pretty: bool = False


@dataclass
class ValidationConfig:
    """Remote validation service configuration."""

    endpoint: str = "https://www.nexml.org/nexml/phylows/validator"
    timeout: float = 10.0
    enabled: bool = True
    user_agent: str = "phylodoc/0.1 (NeXML validator client)"


@dataclass
class Config:
    """Main application configuration."""

    writer: WriterConfig = field(default_factory=WriterConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()
        config.apply_env()
        return config

    @classmethod
    def from_file(cls, path: Path | str) -> "Config":
        """Load configuration from a TOML file, then apply env overrides.

        Args:
            path: Path to a TOML file with optional [writer] and
                [validation] tables.

        Returns:
            Config instance.
        """
        with open(path, "rb") as fh:
            data = tomllib.load(fh)

        config = cls()
        _update_section(config.writer, data.get("writer", {}))
        _update_section(config.validation, data.get("validation", {}))
        config.apply_env()
        return config

    @classmethod
    def from_env_or_file(cls, path: Path | str | None = None) -> "Config":
        """Load from an explicit path, PHYLODOC_CONFIG, or the environment."""
        path = path or os.environ.get("PHYLODOC_CONFIG")
        if path:
            return cls.from_file(path)
        return cls.from_env()

    def apply_env(self) -> None:
        """Apply environment variable overrides in place."""
        if url := os.environ.get("PHYLODOC_VALIDATOR_URL"):
            self.validation.endpoint = url

        if timeout := os.environ.get("PHYLODOC_VALIDATOR_TIMEOUT"):
            self.validation.timeout = float(timeout)

        if offline := os.environ.get("PHYLODOC_OFFLINE"):
            self.validation.enabled = not _is_truthy(offline)

        if pretty := os.environ.get("PHYLODOC_PRETTY"):
            self.writer.pretty = _is_truthy(pretty)


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _update_section(section: Any, values: dict[str, Any]) -> None:
    """Copy known keys from a TOML table onto a config dataclass."""
    known = {f.name for f in fields(section)}
    for key, value in values.items():
        if key in known:
            setattr(section, key, value)
