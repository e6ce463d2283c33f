"""Validation of encoded documents.

``validate`` asks the remote validation service first. When the service
cannot be reached (timeout, connection failure, server error) it logs a
warning and falls back to the local structural check, so validation always
produces a result.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

import httpx
from loguru import logger

from ..adapters.protocols import Validator
from ..core.config import Config, ValidationConfig
from ..core.exceptions import ValidationUnavailable
from ..model.document import Document
from .encoder import encode
from .schema import check_structure

REPORT_ERRORS = frozenset({"error", "fatal"})


@dataclass
class ValidationResult:
    """Outcome of a validation run.

    Attributes:
        valid: Whether the document passed.
        messages: Problems found, in report order.
        source: "remote" or "local".
    """

    valid: bool
    messages: list[str] = field(default_factory=list)
    source: str = "local"


class LocalSchemaValidator:
    """Offline validator backed by the local structural check."""

    def validate(self, data: bytes) -> ValidationResult:
        messages = check_structure(data)
        return ValidationResult(valid=not messages, messages=messages, source="local")


class RemoteValidator:
    """Client for a remote NeXML validation service.

    The document is uploaded as a multipart file. The service answers with
    an XML report whose ``error``/``fatal`` elements list the problems, or
    a JSON object with ``valid`` and ``messages``.
    """

    def __init__(self, config: ValidationConfig | None = None):
        self._config = config or ValidationConfig()

    @property
    def endpoint(self) -> str:
        return self._config.endpoint

    def validate(self, data: bytes) -> ValidationResult:
        """Upload ``data`` and parse the report.

        Raises:
            ValidationUnavailable: On timeout, connection failure, an error
                status or an unreadable report.
        """
        try:
            response = httpx.post(
                self.endpoint,
                files={"file": ("document.xml", data, "application/xml")},
                timeout=self._config.timeout,
                headers={"User-Agent": self._config.user_agent},
                follow_redirects=True,
            )
            response.raise_for_status()
        except httpx.TimeoutException:
            raise ValidationUnavailable(self.endpoint, "Request timed out")
        except httpx.HTTPStatusError as e:
            raise ValidationUnavailable(
                self.endpoint, f"HTTP {e.response.status_code}: {e.response.reason_phrase}"
            )
        except httpx.RequestError as e:
            raise ValidationUnavailable(self.endpoint, str(e))

        content_type = response.headers.get("content-type", "")
        if "json" in content_type:
            return self._parse_json(response.text)
        return self._parse_xml(response.text)

    def _parse_json(self, text: str) -> ValidationResult:
        try:
            report = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationUnavailable(self.endpoint, f"Invalid JSON report: {e}")
        messages = [str(m) for m in report.get("messages", report.get("errors", []))]
        valid = bool(report.get("valid", not messages))
        return ValidationResult(valid=valid, messages=messages, source="remote")

    def _parse_xml(self, text: str) -> ValidationResult:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise ValidationUnavailable(self.endpoint, f"Invalid XML report: {e}")
        messages = [
            (element.text or "").strip()
            for element in root.iter()
            if element.tag.rsplit("}", 1)[-1] in REPORT_ERRORS
        ]
        return ValidationResult(valid=not messages, messages=messages, source="remote")


def validate(
    data: bytes | Document,
    validator: Validator | None = None,
    config: Config | None = None,
) -> ValidationResult:
    """Validate an encoded document (or encode one first).

    Args:
        data: NeXML bytes or a Document.
        validator: Validator to try first; defaults to the remote service
            unless validation is disabled in the configuration.
        config: Configuration; loaded from the environment when omitted.

    Returns:
        The remote result, or the local result when the remote service is
        unavailable or disabled.
    """
    config = config or Config.from_env()
    if isinstance(data, Document):
        data = encode(data, config.writer)

    if validator is None and config.validation.enabled:
        validator = RemoteValidator(config.validation)

    if validator is not None:
        try:
            return validator.validate(data)
        except ValidationUnavailable as e:
            logger.warning(f"{e}; falling back to local structural check")

    result = LocalSchemaValidator().validate(data)
    logger.debug(f"Local validation: valid={result.valid}, {len(result.messages)} messages")
    return result
