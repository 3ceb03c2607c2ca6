"""LlmClient: one chat entry point over any provider adapter.

Purpose
-------
Hide adapter differences behind ``await client.chat(request)``:

- ``stream=True`` returns a :class:`StreamingResult` right away; the request
  is issued when the caller first pulls a fragment.
- ``stream=False`` drains the fragments and returns a :class:`ChatResult`
  with the concatenated text and the adapter's metadata.

Cancellation
------------
``request.cancel_token`` is checked before each pull and after each pulled
fragment. Once it is set, iteration ends without an error and the adapter's
stream is closed, which releases the HTTP response. A ``CancelledError``
raised from inside the sequence is treated the same way.

Failure modes
-------------
Adapter errors (``BackendError``, ``ProtocolError`` ...) propagate unchanged;
partial text of a failed non-streaming drain is discarded.
"""

from __future__ import annotations

import inspect
from contextlib import aclosing
from typing import Any, AsyncIterator, Optional, Sequence, Union

from ..base.cancellation import CancellationToken, CancelledError
from ..base.interfaces import ProviderAdapter
from ..base.models import (
    CANCELLED_STOP_REASON,
    UNKNOWN_STOP_REASON,
    ChatRequest,
    ChatResult,
    FragmentCallback,
    MessageLike,
    StreamFragment,
    StreamingResult,
)
from ..base.streaming import FragmentStream


async def _guarded(
    stream: FragmentStream,
    token: Optional[CancellationToken],
    on_fragment: Optional[FragmentCallback],
) -> AsyncIterator[StreamFragment]:
    """Yield fragments of ``stream`` until it ends or ``token`` is set."""
    try:
        while True:
            if token is not None and token.cancelled:
                return
            try:
                fragment = await stream.__anext__()
            except StopAsyncIteration:
                return
            except CancelledError:
                return
            if token is not None and token.cancelled:
                return
            if on_fragment is not None:
                result = on_fragment(fragment)
                if inspect.isawaitable(result):
                    await result
            yield fragment
    finally:
        await stream.aclose()


class LlmClient:
    """Unified chat client bound to one adapter."""

    def __init__(self, adapter: ProviderAdapter) -> None:
        self._adapter = adapter

    @property
    def adapter(self) -> ProviderAdapter:
        return self._adapter

    @property
    def provider_name(self) -> str:
        return self._adapter.provider_name

    @property
    def model(self) -> str:
        return self._adapter.model

    async def chat(self, request: ChatRequest) -> Union[ChatResult, StreamingResult]:
        stream = self._adapter.send_messages(request.messages, request.overrides)
        fragments = _guarded(stream, request.cancel_token, request.on_fragment)
        if request.stream:
            return StreamingResult(fragments=fragments, meta=stream.meta)

        parts = []
        async with aclosing(fragments) as source:
            async for fragment in source:
                parts.append(fragment.text)

        meta = stream.meta
        token = request.cancel_token
        if token is not None and token.cancelled:
            stop_reason = CANCELLED_STOP_REASON
        else:
            stop_reason = meta.stop_reason or UNKNOWN_STOP_REASON
        return ChatResult(
            text="".join(parts),
            usage_input=meta.usage_input,
            usage_output=meta.usage_output,
            stop_reason=stop_reason,
            tool_calls=meta.tool_calls,
            raw=meta.raw,
        )

    async def chat_text(self, messages: Sequence[MessageLike], **kwargs: Any) -> str:
        """Non-streaming shortcut returning only the answer text."""
        result = await self.chat(ChatRequest(messages=messages, stream=False, **kwargs))
        return result.text  # type: ignore[union-attr]

    async def aclose(self) -> None:
        await self._adapter.aclose()


__all__ = ["LlmClient"]
