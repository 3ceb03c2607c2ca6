"""OpenAI-compatible wire translation (request messages, stream frames, replies).

Pure functions; the adapter in ``client.py`` owns I/O.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Union

from ..base.errors import ProtocolError
from ..base.models import Message, ResponseMeta
from ..base.streaming import DONE_SENTINEL, STREAM_END, SSEFrame, StreamEnd
from ..base.utils import dig, list_at, map_openai_role, text_at

NO_TEXT_CANDIDATE = "unexpected response shape, no text candidate"


def to_wire_messages(messages: Sequence[Message], system_message: Optional[str]) -> List[Dict[str, str]]:
    """Map messages to ``[{"role", "content"}]``; the system message goes first."""
    out: List[Dict[str, str]] = []
    if system_message:
        out.append({"role": "system", "content": system_message})
    out.extend({"role": map_openai_role(m.role), "content": m.content} for m in messages)
    return out


def _record_choice_meta(payload: Any, choice: Any, meta: ResponseMeta) -> None:
    finish = dig(choice, "finish_reason")
    if isinstance(finish, str):
        meta.stop_reason = finish
    usage = dig(payload, "usage")
    if usage is not None:
        meta.record_usage(dig(usage, "prompt_tokens"), dig(usage, "completion_tokens"))


def translate_stream_frame(frame: SSEFrame, meta: ResponseMeta) -> Union[str, None, StreamEnd]:
    """``data: {...}`` -> ``choices[0].delta.content``; ``data: [DONE]`` ends the stream."""
    if frame.data == DONE_SENTINEL:
        return STREAM_END
    if not frame.data:
        return None
    payload = json.loads(frame.data)
    meta.raw = payload
    choice = dig(payload, "choices", 0)
    _record_choice_meta(payload, choice, meta)
    tool_calls = list_at(choice, "delta", "tool_calls")
    if tool_calls:
        meta.tool_calls = [*(meta.tool_calls or []), *tool_calls]
    return text_at(choice, "delta", "content")


def extract_single(payload: Any, meta: ResponseMeta, *, provider: str = "openai", model: Optional[str] = None) -> str:
    """``choices[0].message.content`` of a non-streaming completion."""
    choice = dig(payload, "choices", 0)
    _record_choice_meta(payload, choice, meta)
    tool_calls = dig(choice, "message", "tool_calls")
    if tool_calls:
        meta.tool_calls = tool_calls
    text = text_at(choice, "message", "content")
    if text is None:
        if tool_calls:
            return ""
        raise ProtocolError(NO_TEXT_CANDIDATE, provider=provider, model=model, raw=payload)
    return text


def model_ids(payload: Any) -> List[str]:
    """``data[].id`` of a ``/models`` listing."""
    items = list_at(payload, "data")
    return [i for i in (dig(item, "id") for item in items) if isinstance(i, str)]


__all__ = [
    "NO_TEXT_CANDIDATE",
    "extract_single",
    "model_ids",
    "to_wire_messages",
    "translate_stream_frame",
]
