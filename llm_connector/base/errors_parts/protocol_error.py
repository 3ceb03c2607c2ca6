"""Protocol error for responses that cannot be interpreted.

Covers an empty streaming body, invalid JSON in a single-shot reply, and a
reply whose shape lacks the expected text field.
"""
from __future__ import annotations

from typing import Any, Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class ProtocolError(ProviderError):
    """The backend answered, but not in a shape the adapter understands."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "unknown",
        model: Optional[str] = None,
        raw: Optional[Any] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PROTOCOL,
            message=message,
            provider=provider,
            model=model,
            retryable=False,
            raw=raw,
        )


__all__ = ["ProtocolError"]
