"""
Message DTO used across adapters.

Conversation order is list order. Roles are free-form strings: ``system``,
``user``, ``assistant`` and ``tool`` are recognised by the adapters and
anything else is mapped per backend (usually to ``user``).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Union

# Roles with a defined meaning for every adapter.
Role = Literal["system", "user", "assistant", "tool"]


@dataclass(frozen=True)
class Message:
    """A single conversation turn.

    Attributes:
        role: Author role. Unknown roles are accepted and mapped by adapters.
        content: Plain text of the turn.
    """

    role: str
    content: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Message":
        """Build a message from a ``{"role", "content"}`` mapping."""
        return cls(role=str(data.get("role", "user")), content=data.get("content"))  # type: ignore[arg-type]

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


MessageLike = Union[Message, Mapping[str, Any]]


def coerce_message(item: MessageLike) -> Message:
    """Return ``item`` as a :class:`Message` (mappings are converted)."""
    if isinstance(item, Message):
        return item
    return Message.from_mapping(item)


__all__ = [
    "Message",
    "MessageLike",
    "Role",
    "coerce_message",
]
