"""Error taxonomy shared by the fetch, transform and advisory layers.

Every error carries a ``kind`` that the outcome boundary copies into
``ActionResult.error_kind`` so the UI can tell a "configure this" condition
apart from a generic failure.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class MoneyMapError(RuntimeError):
    """Base class for failures surfaced to callers as an ``ActionResult``."""

    kind = "unknown"


class ConfigurationError(MoneyMapError):
    """Raised when a required URL or API key is missing."""

    kind = "configuration"


class TransportError(MoneyMapError):
    """Raised when the upstream aggregator cannot be reached or answers non-2xx."""

    kind = "transport"

    def __init__(self, message: str, *, status_code: int | None = None, body_excerpt: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_excerpt = body_excerpt


class DecodeStage(str, Enum):
    EXTRACT = "extract"
    PARSE = "parse"
    ENVELOPE = "envelope"
    PAYLOAD = "payload"


class DecodeError(MoneyMapError):
    """Raised when a wire response cannot be decoded; ``stage`` names the failing step."""

    kind = "decode"

    def __init__(self, message: str, *, stage: DecodeStage) -> None:
        super().__init__(message)
        self.stage = stage


class TransformError(MoneyMapError):
    """Raised when an upstream payload does not have the shape a transformer expects."""

    kind = "transform"

    def __init__(self, domain: str, cause: str) -> None:
        super().__init__(f"{domain}: {cause}")
        self.domain = domain
        self.cause = cause


class SchemaValidationError(MoneyMapError):
    """Raised when a transformed record or model output violates its schema."""

    kind = "validation"

    def __init__(self, domain: str, errors: list[dict[str, Any]]) -> None:
        summary = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ())) or '<root>'}: {err.get('msg', 'invalid')}"
            for err in errors[:5]
        )
        if len(errors) > 5:
            summary += f" (+{len(errors) - 5} more)"
        super().__init__(f"{domain} failed schema validation: {summary}")
        self.domain = domain
        self.errors = errors


class EnrichmentError(MoneyMapError):
    """Raised by per-item lookups; callers normally degrade instead of propagating."""

    kind = "enrichment"


class AdvisoryError(MoneyMapError):
    """Raised when the LLM collaborator returns nothing usable."""

    kind = "advisory"


__all__ = [
    "AdvisoryError",
    "ConfigurationError",
    "DecodeError",
    "DecodeStage",
    "EnrichmentError",
    "MoneyMapError",
    "SchemaValidationError",
    "TransformError",
    "TransportError",
]
