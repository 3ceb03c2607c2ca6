"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose the cancellation constructs used by the unified client via the
canonical ``llm_connector.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` is the caller-owned signal; ``cancel`` may be called
  from any thread.
- ``CancelledError`` is raised by code that observes a cancelled token and is
  absorbed by ``LlmClient`` (a cancelled chat ends cleanly).
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
