"""Anthropic Messages API translation helpers.

Typed SSE events handled by :func:`translate_event`:

- ``message_start``: records ``message.usage.input_tokens``
- ``content_block_start``: records ``tool_use`` blocks
- ``content_block_delta``: yields ``delta.text`` (or ``delta.partial_text``)
- ``message_delta``: yields ``delta.text`` when present, records
  ``delta.stop_reason`` and ``usage.output_tokens``
- ``message_stop`` or a ``[DONE]`` data value: end of stream
- ``error``: raises ``BackendError`` carrying the event payload
- anything else (``ping``, ``content_block_stop`` ...): ignored
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Union

from ..base.errors import BackendError, ErrorCode, ProtocolError
from ..base.models import Message, ResponseMeta
from ..base.streaming import DONE_SENTINEL, STREAM_END, SSEFrame, StreamEnd
from ..base.utils import dig, join_system, list_at, split_system, text_at

NO_TEXT_CANDIDATE = "unexpected response shape, no text candidate"

_ERROR_CODES = {
    "invalid_request_error": ErrorCode.VALIDATION,
    "authentication_error": ErrorCode.AUTH,
    "permission_error": ErrorCode.AUTH,
    "not_found_error": ErrorCode.NOT_FOUND,
    "rate_limit_error": ErrorCode.RATE_LIMIT,
    "api_error": ErrorCode.SERVER_ERROR,
    "overloaded_error": ErrorCode.UNAVAILABLE,
}


def split_conversation(
    messages: Sequence[Message], system_message: Optional[str]
) -> tuple[Optional[str], List[Dict[str, Any]]]:
    """Return ``(system_text, wire_messages)``.

    System text is the configured message followed by every inline system
    turn (stripped, blanks dropped), joined with a blank line. Remaining turns
    become ``assistant`` or ``user`` with a single text content block.
    """
    inline, others = split_system(messages)
    wire = [
        {
            "role": "assistant" if m.role == "assistant" else "user",
            "content": [{"type": "text", "text": m.content}],
        }
        for m in others
    ]
    return join_system(system_message, inline), wire


def _text_delta(payload: Any) -> Optional[str]:
    text = text_at(payload, "delta", "text")
    return text if text is not None else text_at(payload, "delta", "partial_text")


def translate_event(
    frame: SSEFrame, meta: ResponseMeta, *, provider: str = "anthropic", model: Optional[str] = None
) -> Union[str, None, StreamEnd]:
    if frame.data == DONE_SENTINEL or frame.event == "message_stop":
        return STREAM_END
    if not frame.data:
        return None
    payload = json.loads(frame.data)
    meta.raw = payload
    event = frame.event or dig(payload, "type")

    if event == "content_block_delta":
        return _text_delta(payload)
    if event == "message_delta":
        stop = dig(payload, "delta", "stop_reason")
        if isinstance(stop, str):
            meta.stop_reason = stop
        meta.record_usage(output_tokens=dig(payload, "usage", "output_tokens"))
        return text_at(payload, "delta", "text")
    if event == "message_start":
        meta.record_usage(
            input_tokens=dig(payload, "message", "usage", "input_tokens"),
            output_tokens=dig(payload, "message", "usage", "output_tokens"),
        )
        return None
    if event == "content_block_start":
        block = dig(payload, "content_block")
        if dig(block, "type") == "tool_use":
            meta.tool_calls = [*(meta.tool_calls or []), block]
        return None
    if event == "error":
        err_type = dig(payload, "error", "type")
        raise BackendError(
            meta.status_code or 0,
            frame.data,
            provider=provider,
            model=model,
            code=_ERROR_CODES.get(err_type, ErrorCode.SERVER_ERROR),
            raw=payload,
        )
    return None


def extract_single(payload: Any, meta: ResponseMeta, *, provider: str = "anthropic", model: Optional[str] = None) -> str:
    """``content[0].text`` (or ``content[0].delta.text``) of a non-streaming reply."""
    meta.record_usage(dig(payload, "usage", "input_tokens"), dig(payload, "usage", "output_tokens"))
    stop = dig(payload, "stop_reason")
    if isinstance(stop, str):
        meta.stop_reason = stop
    blocks = list_at(payload, "content")
    tool_calls = [b for b in blocks if dig(b, "type") == "tool_use"]
    if tool_calls:
        meta.tool_calls = tool_calls
    first = dig(payload, "content", 0)
    text = text_at(first, "text")
    if text is None:
        text = text_at(first, "delta", "text")
    if text is None:
        if tool_calls:
            return ""
        raise ProtocolError(NO_TEXT_CANDIDATE, provider=provider, model=model, raw=payload)
    return text


def model_ids(payload: Any) -> List[str]:
    """``data[].id`` (or ``data[].name``) of a ``/models`` listing."""
    out: List[str] = []
    for item in list_at(payload, "data"):
        ident = dig(item, "id") or dig(item, "name")
        if isinstance(ident, str):
            out.append(ident)
    return out


__all__ = [
    "NO_TEXT_CANDIDATE",
    "extract_single",
    "model_ids",
    "split_conversation",
    "translate_event",
]
