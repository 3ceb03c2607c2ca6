"""Backend (HTTP) failure carrying the upstream status and body text.

Raised for non-2xx responses and for transport failures (``status_code=0``).
The error code is derived from the HTTP status via the shared status map so
that log dashboards group upstream failures the same way as classified
exceptions.
"""
from __future__ import annotations

from typing import Any, Optional

from .classification import _HTTP_STATUS_MAP
from .error_code import ErrorCode
from .provider_error import ProviderError

_RETRYABLE_STATUSES = frozenset({408, 429, 500, 502, 503, 504})


def _code_for_status(status_code: int) -> ErrorCode:
    if status_code in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status_code]
    if status_code >= 500:
        return ErrorCode.SERVER_ERROR
    if status_code >= 400:
        return ErrorCode.VALIDATION
    return ErrorCode.TRANSIENT


class BackendError(ProviderError):
    """Non-success response (or transport failure) from a backend.

    Attributes:
        status_code: HTTP status returned by the backend; ``0`` when the
            request never produced a response.
        body: Response body text as received (may be empty).
    """

    def __init__(
        self,
        status_code: int,
        body: str = "",
        *,
        provider: str = "unknown",
        model: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        raw: Optional[Any] = None,
    ) -> None:
        label = provider.capitalize() if provider else "Backend"
        super().__init__(
            code=code or _code_for_status(status_code),
            message=f"{label} API error {status_code}: {body}",
            provider=provider,
            model=model,
            retryable=status_code in _RETRYABLE_STATUSES or status_code == 0,
            raw=raw,
        )
        self.status_code = status_code
        self.body = body


__all__ = ["BackendError"]
