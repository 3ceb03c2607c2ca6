"""Gemini ``generateContent`` wire helpers."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Union

from ..base.errors import ProtocolError
from ..base.models import Message, ResponseMeta
from ..base.streaming import SSEFrame, StreamEnd
from ..base.utils import dig, join_system, list_at, split_system, text_at

NO_TEXT_CANDIDATE = "unexpected response shape, no text candidate"


def _turn(role: str, text: str) -> Dict[str, Any]:
    return {"role": "model" if role == "assistant" else "user", "parts": [{"text": text}]}


def build_contents(
    messages: Sequence[Message], system_message: Optional[str], system_mode: str
) -> tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
    """Return ``(contents, system_instruction)``.

    ``prepend``: the configured system message becomes a leading user turn and
    inline system turns stay in place as user turns.
    ``instruction``: configured and inline system text go to
    ``systemInstruction``; inline system turns are removed from ``contents``.
    """
    if system_mode == "instruction":
        inline, others = split_system(messages)
        system = join_system(system_message, inline)
        instruction = {"parts": [{"text": system}]} if system else None
        return [_turn(m.role, m.content) for m in others], instruction

    contents = [_turn(m.role, m.content) for m in messages]
    if system_message:
        contents.insert(0, _turn("user", system_message))
    return contents, None


def _record_meta(payload: Any, meta: ResponseMeta) -> None:
    meta.record_usage(
        dig(payload, "usageMetadata", "promptTokenCount"),
        dig(payload, "usageMetadata", "candidatesTokenCount"),
    )
    finish = dig(payload, "candidates", 0, "finishReason")
    if isinstance(finish, str):
        meta.stop_reason = finish
    calls = [
        part["functionCall"]
        for part in list_at(payload, "candidates", 0, "content", "parts")
        if isinstance(part, dict) and "functionCall" in part
    ]
    if calls:
        meta.tool_calls = [*(meta.tool_calls or []), *calls]


def translate_stream_frame(frame: SSEFrame, meta: ResponseMeta) -> Union[str, None, StreamEnd]:
    """Each event carries a partial ``GenerateContentResponse``; the stream ends at close."""
    if not frame.data:
        return None
    payload = json.loads(frame.data)
    meta.raw = payload
    _record_meta(payload, meta)
    return text_at(payload, "candidates", 0, "content", "parts", 0, "text")


def extract_single(payload: Any, meta: ResponseMeta, *, provider: str = "gemini", model: Optional[str] = None) -> str:
    _record_meta(payload, meta)
    text = text_at(payload, "candidates", 0, "content", "parts", 0, "text")
    if text is None:
        if meta.tool_calls:
            return ""
        raise ProtocolError(NO_TEXT_CANDIDATE, provider=provider, model=model, raw=payload)
    return text


def model_ids(payload: Any) -> List[str]:
    """``models[].name`` without the ``models/`` prefix."""
    out: List[str] = []
    for item in list_at(payload, "models"):
        name = dig(item, "name")
        if isinstance(name, str):
            out.append(name.rsplit("/", 1)[-1])
    return out


__all__ = [
    "NO_TEXT_CANDIDATE",
    "build_contents",
    "extract_single",
    "model_ids",
    "translate_stream_frame",
]
