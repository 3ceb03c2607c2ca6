"""llm_connector.config.defaults
=============================

Small, stable default values used by the configuration loader, the relay
service and the CLI. Plain constants only (no I/O, no imports from other
connector packages) so this module can be imported from anywhere.
"""

from __future__ import annotations

from typing import Any, Dict

# ---- Backend endpoints ----
OPENAI_DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_DEFAULT_ENDPOINT = "https://api.anthropic.com/v1/messages"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
SILICONFLOW_DEFAULT_ENDPOINT = "https://api.siliconflow.cn/v1/chat/completions"
LMSTUDIO_DEFAULT_ENDPOINT = "http://127.0.0.1:1234/v1/chat/completions"

# ---- Default models ----
OPENAI_DEFAULT_MODEL = "gpt-4.1-mini"
ANTHROPIC_DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
GEMINI_DEFAULT_MODEL = "gemini-1.5-flash"
SILICONFLOW_DEFAULT_MODEL = "Qwen/Qwen2.5-7B-Instruct"
LOCAL_DEFAULT_MODEL = "Qwen2-0.5B-Instruct-q4f16_1-MLC"

# LM Studio accepts any bearer token; it only checks presence.
LMSTUDIO_DEFAULT_API_KEY = "lm-studio"  # pragma: allowlist secret

# ---- OpenAI-compatible presets ----
# Preset name -> defaults applied on top of the ``openai`` kind.
PRESETS: Dict[str, Dict[str, Any]] = {
    "siliconflow": {
        "kind": "openai",
        "model": SILICONFLOW_DEFAULT_MODEL,
        "base_url": SILICONFLOW_DEFAULT_ENDPOINT,
    },
    "lmstudio": {
        "kind": "openai",
        "base_url": LMSTUDIO_DEFAULT_ENDPOINT,
        "api_key": LMSTUDIO_DEFAULT_API_KEY,
    },
}

# ---- Service / HTTP layer ----
RELAY_DEFAULT_HOST = "127.0.0.1"
RELAY_DEFAULT_PORT = 3003
# Comma-separated list of allowed origins for the relay service.
RELAY_CORS_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"
RELAY_DEFAULT_PROVIDER = "siliconflow"

# ---- CLI ----
CLI_DEFAULT_PROVIDER = "openai"

__all__ = [
    "OPENAI_DEFAULT_ENDPOINT",
    "ANTHROPIC_DEFAULT_ENDPOINT",
    "GEMINI_DEFAULT_BASE_URL",
    "SILICONFLOW_DEFAULT_ENDPOINT",
    "LMSTUDIO_DEFAULT_ENDPOINT",
    "OPENAI_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_MODEL",
    "GEMINI_DEFAULT_MODEL",
    "SILICONFLOW_DEFAULT_MODEL",
    "LOCAL_DEFAULT_MODEL",
    "LMSTUDIO_DEFAULT_API_KEY",
    "PRESETS",
    "RELAY_DEFAULT_HOST",
    "RELAY_DEFAULT_PORT",
    "RELAY_CORS_DEFAULT_ORIGINS",
    "RELAY_DEFAULT_PROVIDER",
    "CLI_DEFAULT_PROVIDER",
]
