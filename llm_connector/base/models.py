"""Connector data model public surface.

Re-exports the DTOs implemented under ``llm_connector.base.models_parts``:

- ``Message``: one conversation turn (role + text).
- ``StreamFragment``: one decoded piece of answer text.
- ``ResponseMeta``: usage/stop/tool-call facts collected while decoding.
- ``ChatRequest``: input of ``LlmClient.chat``.
- ``ChatResult``: aggregated non-streaming answer.
- ``StreamingResult``: live single-use fragment sequence.
"""

from .models_parts import (
    CANCELLED_STOP_REASON,
    UNKNOWN_STOP_REASON,
    ChatRequest,
    ChatResult,
    FragmentCallback,
    Message,
    MessageLike,
    ResponseMeta,
    Role,
    StreamFragment,
    StreamingResult,
    coerce_message,
)

__all__ = [
    "Message",
    "MessageLike",
    "Role",
    "coerce_message",
    "StreamFragment",
    "ResponseMeta",
    "ChatRequest",
    "FragmentCallback",
    "ChatResult",
    "CANCELLED_STOP_REASON",
    "UNKNOWN_STOP_REASON",
    "StreamingResult",
]
