"""Safe access into decoded backend payloads.

Backend replies are nested JSON (``choices[0].delta.content``). Local engines
may return the same shape as plain objects. ``dig`` walks either form and
returns ``default`` instead of raising when a step is missing.
"""
from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

_MISSING = object()

PathKey = Union[str, int]


def dig(payload: Any, *path: PathKey, default: Any = None) -> Any:
    """Return ``payload[path[0]][path[1]]...`` or ``default`` when absent.

    String keys look up mappings first, then attributes; integer keys index
    sequences (strings excluded). A ``None`` value at the end of the path is
    returned as ``default``.
    """
    current = payload
    for key in path:
        if current is None:
            return default
        if isinstance(key, int):
            if isinstance(current, (str, bytes)) or not isinstance(current, Sequence):
                return default
            if not -len(current) <= key < len(current):
                return default
            current = current[key]
            continue
        if isinstance(current, Mapping):
            current = current.get(key, _MISSING)
        else:
            current = getattr(current, key, _MISSING)
        if current is _MISSING:
            return default
    return default if current is None else current


def text_at(payload: Any, *path: PathKey) -> str | None:
    """Return the value at ``path`` when it is a string, else ``None``."""
    value = dig(payload, *path)
    return value if isinstance(value, str) else None


def list_at(payload: Any, *path: PathKey) -> list:
    """Return the value at ``path`` when it is a list, else ``[]``."""
    value = dig(payload, *path)
    return value if isinstance(value, list) else []


__all__ = ["dig", "list_at", "text_at"]
