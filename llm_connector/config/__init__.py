"""Layered configuration loader for provider connections.

Merge order (later wins)
------------------------
1. Built-in defaults per provider name (``DEFAULTS`` plus presets)
2. Section of the optional config file named by ``LLM_CONNECTOR_CONFIG_FILE``
   (JSON, or YAML via PyYAML)
3. Environment variables ``<PROVIDER>_MODEL``, ``_API_KEY``, ``_BASE_URL``,
   ``_SYSTEM_MESSAGE``, ``_MODE`` (e.g. ``ANTHROPIC_MODEL``)
4. The canonical key variable from ``config.env`` (``GEMINI_API_KEY`` or its
   alias ``GOOGLE_API_KEY`` ...) when no key was set by steps 1-3
5. Explicit overrides passed by the caller (``None`` values ignored)

Provider names are the four kinds (``openai``, ``anthropic``, ``gemini``,
``local``) and the OpenAI-compatible presets (``siliconflow``, ``lmstudio``),
which resolve to ``kind="openai"``.

Config file example::

    anthropic:
      model: claude-3-5-sonnet-20241022
      max_output_tokens: 2048
    siliconflow:
      system_message: "You are helpful."

Public API
----------
* get_provider_config(provider, overrides=None) -> dict
* load_provider_config(provider, overrides=None) -> ProviderConfig
* known_providers() -> list[str]
* reset_config_cache()

The loader only reads; persisting configuration is left to the application.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..base.dto import BaseProviderConfig, parse_provider_config
from ..base.errors import ConfigError, UnknownProviderError
from .defaults import (
    ANTHROPIC_DEFAULT_MODEL,
    GEMINI_DEFAULT_MODEL,
    LOCAL_DEFAULT_MODEL,
    OPENAI_DEFAULT_MODEL,
    PRESETS,
)
from .env import get_env_api_key, is_placeholder

CONFIG_FILE_ENV = "LLM_CONNECTOR_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"kind": "openai", "model": OPENAI_DEFAULT_MODEL},
    "anthropic": {"kind": "anthropic", "model": ANTHROPIC_DEFAULT_MODEL},
    "gemini": {"kind": "gemini", "model": GEMINI_DEFAULT_MODEL},
    "local": {"kind": "local", "model": LOCAL_DEFAULT_MODEL},
    **PRESETS,
}

ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "system_message": "SYSTEM_MESSAGE",
    "mode": "MODE",
}

_FILE_CACHE: Dict[str, Dict[str, Any]] = {}


def known_providers() -> List[str]:
    """Provider names accepted by :func:`get_provider_config`."""
    return list(DEFAULTS)


def reset_config_cache() -> None:
    """Forget parsed config files (tests switch files between cases)."""
    _FILE_CACHE.clear()


def _parse_config_text(text: str, path: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file {path} is neither JSON nor YAML: {exc}") from exc
    return data if isinstance(data, dict) else {}


def _load_external_config() -> Dict[str, Any]:
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    if path in _FILE_CACHE:
        return _FILE_CACHE[path]
    p = Path(path).expanduser()
    data = _parse_config_text(p.read_text(encoding="utf-8"), path) if p.is_file() else {}
    _FILE_CACHE[path] = data
    return data


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is None or is_placeholder(val):
            continue
        out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged (unvalidated) configuration mapping for ``provider``.

    Raises:
        UnknownProviderError: ``provider`` is neither a kind nor a preset.
    """
    name = (provider or "").lower().strip()
    if name not in DEFAULTS:
        raise UnknownProviderError(f"Unknown provider '{provider}'", provider=name or "unknown")

    cfg: Dict[str, Any] = dict(DEFAULTS[name])

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if not cfg.get("api_key") and cfg.get("kind") != "local":
        if key := get_env_api_key(name):
            cfg["api_key"] = key

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    # presets always speak the OpenAI-compatible protocol
    cfg["kind"] = DEFAULTS[name]["kind"]
    return cfg


def load_provider_config(provider: str, overrides: Optional[Mapping[str, Any]] = None) -> BaseProviderConfig:
    """Merge and validate the configuration for ``provider``.

    Raises:
        UnknownProviderError: Unknown provider name.
        ConfigError: The merged configuration does not validate.
    """
    return parse_provider_config(get_provider_config(provider, overrides))


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "get_provider_config",
    "load_provider_config",
    "known_providers",
    "reset_config_cache",
]
