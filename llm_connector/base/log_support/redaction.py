"""Secret redaction for log payloads.

Adapters log endpoints and headers for debugging. Credentials travel either
as headers (``Authorization``, ``x-api-key``) or, for Gemini direct mode, as a
``key`` query parameter; both are masked before anything reaches a handler.
"""
from __future__ import annotations

from typing import Dict, Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

REDACTED = "***"

SECRET_HEADERS = frozenset({"authorization", "x-api-key", "x-goog-api-key", "api-key"})
SECRET_QUERY_PARAMS = frozenset({"key", "api_key"})


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Return a copy of ``headers`` with credential values masked."""
    return {k: (REDACTED if k.lower() in SECRET_HEADERS else v) for k, v in headers.items()}


def redact_url(url: str) -> str:
    """Mask credential query parameters (``?key=...``) in ``url``."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    pairs = [
        (k, REDACTED if k.lower() in SECRET_QUERY_PARAMS else v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(pairs, safe="*")))


__all__ = ["REDACTED", "redact_headers", "redact_url"]
