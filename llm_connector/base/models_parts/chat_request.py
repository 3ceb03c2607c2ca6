"""
ChatRequest DTO: what a caller hands to ``LlmClient.chat``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Union

from ..cancellation import CancellationToken
from .message import MessageLike
from .stream_fragment import StreamFragment

FragmentCallback = Callable[[StreamFragment], Union[None, Awaitable[None]]]


@dataclass
class ChatRequest:
    """A chat invocation.

    Attributes:
        messages: Ordered conversation (``Message`` or role/content mappings).
        stream: ``True`` returns a ``StreamingResult``; ``False`` drains the
            reply into a ``ChatResult``.
        cancel_token: Optional cooperative cancellation signal.
        on_fragment: Optional per-fragment observer (sync or async), invoked
            before the fragment is handed on.
        overrides: Extra request-body fields merged last (e.g. temperature).
    """

    messages: Sequence[MessageLike]
    stream: bool = False
    cancel_token: Optional[CancellationToken] = None
    on_fragment: Optional[FragmentCallback] = None
    overrides: Optional[Dict[str, Any]] = None


__all__ = ["ChatRequest", "FragmentCallback"]
