"""Streaming primitives: SSE decoders, the fragment pump and ``FragmentStream``."""

from .sse import (
    DONE_SENTINEL,
    STREAM_END,
    DecoderState,
    SSEFrame,
    SimpleSSEDecoder,
    StreamEnd,
    TypedSSEDecoder,
)
from .pump import EMPTY_STREAM_MESSAGE, Translator, WarningSink, log_decode_warning, pump_fragments
from .fragment_stream import FragmentStream, SourceFactory

__all__ = [
    "DONE_SENTINEL",
    "STREAM_END",
    "DecoderState",
    "SSEFrame",
    "SimpleSSEDecoder",
    "StreamEnd",
    "TypedSSEDecoder",
    "EMPTY_STREAM_MESSAGE",
    "Translator",
    "WarningSink",
    "log_decode_warning",
    "pump_fragments",
    "FragmentStream",
    "SourceFactory",
]
