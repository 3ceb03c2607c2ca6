"""Invalid lifecycle transition (e.g. connecting while already connected)."""
from __future__ import annotations

from .error_code import ErrorCode
from .provider_error import ProviderError


class StateError(ProviderError):
    """Raised when an operation is not allowed in the current connection state."""

    def __init__(self, message: str, *, provider: str = "connection") -> None:
        super().__init__(code=ErrorCode.CONFLICT, message=message, provider=provider)


__all__ = ["StateError"]
