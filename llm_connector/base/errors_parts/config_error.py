"""Configuration error raised before any network activity.

A ``ConfigError`` means the caller supplied an incomplete or inconsistent
provider configuration (missing model, direct mode without a secret, proxy
mode without an endpoint, malformed JSON header/body text). It is never
retryable.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class ConfigError(ProviderError):
    """Invalid or incomplete provider configuration.

    Attributes:
        field: Name of the offending configuration field when a single field
            can be blamed (``None`` for cross-field failures).
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str = "unknown",
        model: Optional[str] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION,
            message=message,
            provider=provider,
            model=model,
            retryable=False,
        )
        self.field = field


class UnknownProviderError(ConfigError):
    """Raised when a provider kind cannot be resolved to an adapter."""


__all__ = ["ConfigError", "UnknownProviderError"]
