"""Message normalization helpers shared by adapters.

Helpers here are pure: they never mutate the caller's messages and perform
no I/O.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..models import Message, MessageLike, coerce_message

OPENAI_ROLES = frozenset({"system", "user", "assistant"})


def normalize_messages(messages: Iterable[MessageLike]) -> List[Message]:
    """Return ``messages`` as ``Message`` objects, dropping non-text content.

    Turns whose ``content`` is not a string (structured parts, ``None``) are
    skipped; the relative order of the remaining turns is preserved.
    """
    out: List[Message] = []
    for item in messages:
        msg = coerce_message(item)
        if isinstance(msg.content, str):
            out.append(msg)
    return out


def map_openai_role(role: str) -> str:
    """``system``/``user``/``assistant`` pass through; anything else is ``user``."""
    return role if role in OPENAI_ROLES else "user"


def split_system(messages: Iterable[Message]) -> Tuple[List[str], List[Message]]:
    """Separate inline ``system`` turns from the rest.

    Returns ``(system_texts, others)``; system texts are stripped and blank
    ones dropped.
    """
    system: List[str] = []
    others: List[Message] = []
    for m in messages:
        if m.role == "system":
            text = m.content.strip()
            if text:
                system.append(text)
        else:
            others.append(m)
    return system, others


def join_system(configured: Optional[str], inline: Iterable[str]) -> Optional[str]:
    """Configured system message first, then inline ones, separated by a blank line."""
    parts = [p for p in [(configured or "").strip(), *inline] if p]
    return "\n\n".join(parts) if parts else None


__all__ = [
    "OPENAI_ROLES",
    "join_system",
    "map_openai_role",
    "normalize_messages",
    "split_system",
]
