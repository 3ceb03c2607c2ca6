"""Auxiliary logging helpers (formatter, context, redaction) used by base.logging."""

from .json_formatter import JsonFormatter, ISO
from .logging_context import LogContext
from .redaction import REDACTED, redact_headers, redact_url

__all__ = ["JsonFormatter", "ISO", "LogContext", "REDACTED", "redact_headers", "redact_url"]
