"""Warning type for malformed stream frames.

Decoders never raise for a single bad frame: they build a ``DecodeWarning``
describing it, hand it to the warning sink (structured log by default) and
keep decoding.
"""
from __future__ import annotations


class DecodeWarning(UserWarning):
    """A stream frame could not be parsed and was skipped.

    Attributes:
        frame: Raw frame text that failed to parse.
        provider: Provider kind whose stream produced the frame.
    """

    def __init__(self, message: str, *, frame: str = "", provider: str = "unknown") -> None:
        super().__init__(message)
        self.frame = frame
        self.provider = provider


__all__ = ["DecodeWarning"]
