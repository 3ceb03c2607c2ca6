"""
ChatResult DTO: the aggregated answer of a non-streaming chat.

``raw`` is kept for diagnostics and excluded from ``to_dict`` so that large
backend payloads are not serialized by accident.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

UNKNOWN_STOP_REASON = "unknown"
CANCELLED_STOP_REASON = "cancelled"


@dataclass
class ChatResult:
    """Completed answer with best-effort usage and stop information."""

    text: str
    usage_input: int = 0
    usage_output: int = 0
    stop_reason: str = UNKNOWN_STOP_REASON
    tool_calls: Optional[Any] = None
    raw: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable view without ``raw``."""
        return {
            "text": self.text,
            "usage": {"input": self.usage_input, "output": self.usage_output},
            "stop_reason": self.stop_reason,
            "tool_calls": self.tool_calls,
        }


__all__ = ["ChatResult", "UNKNOWN_STOP_REASON", "CANCELLED_STOP_REASON"]
