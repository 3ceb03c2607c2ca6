"""
ResponseMeta: side-channel facts collected while a reply is decoded.

Adapters fill it as frames arrive (usage counters, stop reason, tool calls,
last raw payload). It is only complete once the fragment sequence has been
fully consumed. Usage numbers are best-effort pass-through of what the
backend reports; nothing is counted locally.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ResponseMeta:
    """Mutable metadata for one backend reply.

    Attributes:
        usage_input: Prompt/input token count reported by the backend.
        usage_output: Completion/output token count reported by the backend.
        stop_reason: Backend stop/finish reason, when reported.
        tool_calls: Raw tool-call structure, when reported.
        raw: Last decoded payload (single reply body or last stream frame).
        status_code: HTTP status of the reply (``None`` for local engines).
    """

    usage_input: int = 0
    usage_output: int = 0
    stop_reason: Optional[str] = None
    tool_calls: Optional[Any] = None
    raw: Optional[Any] = None
    status_code: Optional[int] = None

    def record_usage(self, input_tokens: Any = None, output_tokens: Any = None) -> None:
        """Store integer usage counters; non-integer values are ignored."""
        if isinstance(input_tokens, int) and not isinstance(input_tokens, bool):
            self.usage_input = input_tokens
        if isinstance(output_tokens, int) and not isinstance(output_tokens, bool):
            self.usage_output = output_tokens

    def tokens(self) -> Dict[str, int]:
        return {"input": self.usage_input, "output": self.usage_output}


__all__ = ["ResponseMeta"]
