"""Models parts package: one DTO per module, re-exported by ``base.models``."""

from .message import Message, MessageLike, Role, coerce_message
from .stream_fragment import StreamFragment
from .response_meta import ResponseMeta
from .chat_request import ChatRequest, FragmentCallback
from .chat_result import ChatResult, CANCELLED_STOP_REASON, UNKNOWN_STOP_REASON
from .streaming_result import StreamingResult

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
