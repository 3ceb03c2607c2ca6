"""FragmentStream: the lazy, single-use fragment sequence returned by adapters.

An adapter's ``send_messages`` builds a ``FragmentStream`` around a source
factory. Nothing happens until the first ``__anext__``: only then is the
factory called (issuing the HTTP request or engine call). Once the source is
exhausted, failed or closed, every further pull raises ``StopAsyncIteration``.
"""
from __future__ import annotations

from typing import AsyncIterator, Callable, Optional

from ..models import ResponseMeta, StreamFragment

SourceFactory = Callable[[ResponseMeta], AsyncIterator[str]]


class FragmentStream:
    """Async iterator of :class:`StreamFragment` with attached :class:`ResponseMeta`."""

    def __init__(self, source_factory: SourceFactory, *, provider: str, model: Optional[str] = None) -> None:
        self._factory = source_factory
        self._source: Optional[AsyncIterator[str]] = None
        self._done = False
        self.meta = ResponseMeta()
        self.provider = provider
        self.model = model

    def __aiter__(self) -> "FragmentStream":
        return self

    async def __anext__(self) -> StreamFragment:
        if self._done:
            raise StopAsyncIteration
        if self._source is None:
            self._source = self._factory(self.meta)
        try:
            text = await self._source.__anext__()
        except BaseException:
            self._done = True
            raise
        return StreamFragment(text=text)

    async def aclose(self) -> None:
        """Release the underlying response; later pulls yield nothing."""
        self._done = True
        source, self._source = self._source, None
        closer = getattr(source, "aclose", None)
        if closer is not None:
            await closer()

    async def collect_text(self) -> str:
        """Drain the stream and return the concatenated text."""
        return "".join([fragment.text async for fragment in self])


__all__ = ["FragmentStream", "SourceFactory"]
