"""llm_connector.config.env
========================

Environment variable mapping for provider credentials.

Design Notes
------------
- ``ENV_MAP`` holds the canonical key variable per provider name (kinds and
  presets). Providers that historically accepted several names list them in
  ``ENV_ALIASES`` with the canonical name first.
- Values that look like placeholders (``changeme``, ``your-key-here`` ...) are
  treated as unset so a template ``.env`` never reaches a backend.

Failure Modes
-------------
Helpers never raise for unknown providers or unset variables; they return
``None`` and the caller decides.
"""

from __future__ import annotations

import os
from typing import Dict, Iterator, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    # GOOGLE_API_KEY accepted as alias, see ENV_ALIASES.
    "gemini": "GEMINI_API_KEY",
    "siliconflow": "SILICONFLOW_API_KEY",
    "lmstudio": "LMSTUDIO_API_KEY",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "your-key", "your_api_key", "<")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if ``val`` looks like a template value rather than a secret."""
    if val is None:
        return False
    v = str(val).strip().lower()
    return any(marker in v for marker in _PLACEHOLDER_MARKERS)


def get_env_var_candidates(provider: str) -> Iterator[str]:
    """Yield acceptable key variable names, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, variable_name)`` of the first usable key variable."""
    for name in get_env_var_candidates(provider):
        value = os.getenv(name)
        if value and value.strip() and not is_placeholder(value):
            return value.strip(), name
    return None, None


def get_env_api_key(provider: str) -> Optional[str]:
    """Return the API key for ``provider`` from the environment, if any."""
    return resolve_provider_key(provider)[0]


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_provider_key",
    "get_env_api_key",
]
