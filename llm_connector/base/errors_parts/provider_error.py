"""
Structured connector error exception type.

Every failure raised by the connector carries a normalized `ErrorCode`, the
provider kind it originated from and, when known, the model. Subclasses in
this package narrow the category (configuration, backend, protocol, state).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured connector error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider kind where the error originated (e.g., ``"openai"``).
        model: Optional model name associated with the failure.
        retryable: Hint for callers that implement their own retry policy.
            The connector itself never retries.
        raw: Optional original exception or payload for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str = "unknown"
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
