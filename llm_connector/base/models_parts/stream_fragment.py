"""StreamFragment DTO: one decoded piece of answer text."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StreamFragment:
    """A piece of answer text; concatenating fragments in order yields the answer."""

    text: str


__all__ = ["StreamFragment"]
