"""Small pure helpers shared across adapters."""

from .payloads import dig, list_at, text_at
from .messages import join_system, map_openai_role, normalize_messages, split_system

__all__ = ["dig", "list_at", "text_at", "join_system", "map_openai_role", "normalize_messages", "split_system"]
