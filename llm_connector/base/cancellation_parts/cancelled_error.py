"""Cancellation error type.

Raised by ``CancellationToken.raise_if_cancelled``. The unified client treats
it as a clean end of the fragment sequence rather than a failure.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation observes a cooperative cancellation request.

    Distinct from ``asyncio.CancelledError``: this one is raised by code that
    polls a :class:`CancellationToken`, never by the event loop.
    """

__all__ = ["CancelledError"]
