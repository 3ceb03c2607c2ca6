"""
StreamingResult DTO: a live, single-use fragment sequence.

The request is issued lazily when the caller first pulls from ``fragments``.
The sequence is finite (it ends when the backend stream ends) and cannot be
restarted: iterating again after exhaustion yields nothing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import AsyncIterator, List

from .response_meta import ResponseMeta
from .stream_fragment import StreamFragment


@dataclass
class StreamingResult:
    """Fragments of an answer still being produced.

    Attributes:
        fragments: Async iterator of :class:`StreamFragment`.
        meta: Metadata filled while fragments are consumed.
        restartable: Always ``False``.
        finite: Always ``True``.
    """

    fragments: AsyncIterator[StreamFragment]
    meta: ResponseMeta = field(default_factory=ResponseMeta)
    restartable: bool = False
    finite: bool = True

    def __aiter__(self) -> AsyncIterator[StreamFragment]:
        return self.fragments

    async def collect_text(self) -> str:
        """Consume the remaining fragments and return their concatenation."""
        parts: List[str] = [fragment.text async for fragment in self.fragments]
        return "".join(parts)

    async def aclose(self) -> None:
        """Stop consumption early and release the underlying response."""
        closer = getattr(self.fragments, "aclose", None)
        if closer is not None:
            await closer()


__all__ = ["StreamingResult"]
