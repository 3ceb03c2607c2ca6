"""Server-Sent-Events decoders.

Purpose
-------
Turn an arbitrarily chunked byte stream into SSE frames. Two dialects exist:

``SimpleSSEDecoder``
    Line oriented. Every ``data:`` line is a frame on its own (OpenAI-style
    chat completions, Gemini ``alt=sse``). Other lines are ignored.

``TypedSSEDecoder``
    Frame oriented. ``event:`` and ``data:`` lines accumulate until a blank
    line dispatches the frame (Anthropic Messages API). Multiple ``data:``
    lines are joined with ``\\n``.

Chunk independence
------------------
Decoders buffer raw bytes and only decode complete lines. A line boundary or
a multi-byte UTF-8 sequence split across chunks is retained and prefixed to
the next chunk, so any chunking of the same byte stream yields the same
frames. ``close`` flushes a final line (and frame) that was not terminated
before end of input.

States
------
``ACCUMULATING`` while waiting for a complete frame, ``EMIT`` after a feed that
produced frames, ``TERMINATED`` after ``terminate``; a terminated decoder
ignores further input.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class DecoderState(str, Enum):
    ACCUMULATING = "accumulating"
    EMIT = "emit"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class SSEFrame:
    """One decoded frame: optional event name plus data text."""

    data: str
    event: Optional[str] = None


class StreamEnd:
    """Sentinel type returned by frame translators to end a stream."""

    _instance: Optional["StreamEnd"] = None

    def __new__(cls) -> "StreamEnd":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "STREAM_END"


STREAM_END = StreamEnd()

DONE_SENTINEL = "[DONE]"


class _LineBuffer:
    """Byte buffer yielding complete, decoded lines (``\\r\\n`` or ``\\n``)."""

    def __init__(self) -> None:
        self._pending = bytearray()

    def feed(self, chunk: bytes) -> List[str]:
        self._pending.extend(chunk)
        lines: List[str] = []
        while True:
            idx = self._pending.find(b"\n")
            if idx < 0:
                break
            raw = bytes(self._pending[:idx])
            del self._pending[: idx + 1]
            lines.append(_decode_line(raw))
        return lines

    def flush(self) -> Optional[str]:
        if not self._pending:
            return None
        raw = bytes(self._pending)
        self._pending.clear()
        return _decode_line(raw)

    def clear(self) -> None:
        self._pending.clear()


def _decode_line(raw: bytes) -> str:
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw.decode("utf-8", errors="replace")


def _field(line: str, name: str) -> Optional[str]:
    """Return the value of ``name:`` in ``line`` (one leading space removed)."""
    prefix = name + ":"
    if not line.startswith(prefix):
        return None
    value = line[len(prefix):]
    return value[1:] if value.startswith(" ") else value


class _BaseDecoder:
    def __init__(self) -> None:
        self._lines = _LineBuffer()
        self.state = DecoderState.ACCUMULATING

    def feed(self, chunk: bytes) -> List[SSEFrame]:
        """Consume ``chunk`` and return the frames it completed."""
        if self.state is DecoderState.TERMINATED or not chunk:
            return []
        frames: List[SSEFrame] = []
        for line in self._lines.feed(chunk):
            frames.extend(self._on_line(line))
        self.state = DecoderState.EMIT if frames else DecoderState.ACCUMULATING
        return frames

    def close(self) -> List[SSEFrame]:
        """Flush input left over at end of stream and terminate."""
        if self.state is DecoderState.TERMINATED:
            return []
        frames: List[SSEFrame] = []
        tail = self._lines.flush()
        if tail is not None:
            frames.extend(self._on_line(tail))
        frames.extend(self._on_eof())
        self.terminate()
        return frames

    def terminate(self) -> None:
        """Enter ``TERMINATED``; buffered input is discarded."""
        self._lines.clear()
        self.state = DecoderState.TERMINATED

    def _on_line(self, line: str) -> List[SSEFrame]:  # pragma: no cover - abstract
        raise NotImplementedError

    def _on_eof(self) -> List[SSEFrame]:
        return []


class SimpleSSEDecoder(_BaseDecoder):
    """Each ``data:`` line is one frame; its value is whitespace-trimmed."""

    def _on_line(self, line: str) -> List[SSEFrame]:
        value = _field(line, "data")
        if value is None:
            return []
        return [SSEFrame(data=value.strip())]


class TypedSSEDecoder(_BaseDecoder):
    """``event:``/``data:`` lines accumulate into a frame until a blank line."""

    def __init__(self) -> None:
        super().__init__()
        self._event: Optional[str] = None
        self._data: List[str] = []

    def _on_line(self, line: str) -> List[SSEFrame]:
        if not line.strip():
            return self._dispatch()
        if line.startswith(":"):
            return []
        event = _field(line, "event")
        if event is not None:
            self._event = event.strip()
            return []
        data = _field(line, "data")
        if data is not None:
            self._data.append(data)
        return []

    def _on_eof(self) -> List[SSEFrame]:
        return self._dispatch()

    def _dispatch(self) -> List[SSEFrame]:
        if self._event is None and not self._data:
            return []
        frame = SSEFrame(data="\n".join(self._data).strip(), event=self._event)
        self._event = None
        self._data = []
        return [frame]

    def terminate(self) -> None:
        super().terminate()
        self._event = None
        self._data = []


__all__ = [
    "DecoderState",
    "SSEFrame",
    "STREAM_END",
    "StreamEnd",
    "DONE_SENTINEL",
    "SimpleSSEDecoder",
    "TypedSSEDecoder",
]
