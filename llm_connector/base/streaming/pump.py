"""Drive an SSE decoder over a byte stream and translate frames to text.

Adapters supply a ``translate(frame, meta)`` callable per dialect. It returns
the fragment text, ``None`` to skip the frame, or ``STREAM_END`` to stop. A
``ValueError`` (``json.JSONDecodeError`` included) or ``TypeError`` raised by
``translate`` marks the frame as malformed: a :class:`DecodeWarning` is
reported and decoding continues with the next frame. Any other exception propagates.
"""
from __future__ import annotations

import logging
from typing import AsyncIterator, Callable, Optional, Union

from ..errors import DecodeWarning, ProtocolError
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import ResponseMeta
from .sse import STREAM_END, SSEFrame, StreamEnd, SimpleSSEDecoder, TypedSSEDecoder

Translator = Callable[[SSEFrame, ResponseMeta], Union[str, None, StreamEnd]]
WarningSink = Callable[[DecodeWarning], None]

EMPTY_STREAM_MESSAGE = "response body empty, cannot stream"

_logger = get_logger("streaming")


def log_decode_warning(warning: DecodeWarning, logger: Optional[logging.Logger] = None) -> None:
    """Default warning sink: one structured WARNING log line per bad frame."""
    normalized_log_event(
        logger or _logger,
        "stream.decode_warning",
        LogContext(provider=warning.provider),
        phase="decode",
        level=logging.WARNING,
        detail=str(warning),
        frame=warning.frame[:200],
    )


async def pump_fragments(
    chunks: AsyncIterator[bytes],
    decoder: Union[SimpleSSEDecoder, TypedSSEDecoder],
    translate: Translator,
    meta: ResponseMeta,
    *,
    provider: str,
    model: Optional[str] = None,
    on_warning: Optional[WarningSink] = None,
) -> AsyncIterator[str]:
    """Yield non-empty fragment texts decoded from ``chunks``.

    Raises:
        ProtocolError: The body produced no bytes at all.
    """
    sink = on_warning or log_decode_warning
    received = False

    def _apply(frame: SSEFrame) -> Union[str, None, StreamEnd]:
        try:
            return translate(frame, meta)
        except (ValueError, TypeError) as exc:
            sink(DecodeWarning(f"skipping malformed frame: {exc}", frame=frame.data, provider=provider))
            return None

    try:
        async for chunk in chunks:
            if not chunk:
                continue
            received = True
            for frame in decoder.feed(chunk):
                result = _apply(frame)
                if result is STREAM_END:
                    decoder.terminate()
                    return
                if result:
                    yield result  # type: ignore[misc]
    finally:
        closer = getattr(chunks, "aclose", None)
        if closer is not None:
            await closer()

    if not received:
        raise ProtocolError(EMPTY_STREAM_MESSAGE, provider=provider, model=model)

    for frame in decoder.close():
        result = _apply(frame)
        if result is STREAM_END:
            return
        if result:
            yield result  # type: ignore[misc]


__all__ = [
    "EMPTY_STREAM_MESSAGE",
    "Translator",
    "WarningSink",
    "log_decode_warning",
    "pump_fragments",
]
