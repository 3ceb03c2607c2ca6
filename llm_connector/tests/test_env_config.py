"""Layered configuration: defaults -> config file -> environment -> overrides."""
from __future__ import annotations

import json

import pytest

from llm_connector.base.dto import OpenAIConfig
from llm_connector.base.errors import ConfigError, UnknownProviderError
from llm_connector.config import (
    CONFIG_FILE_ENV,
    get_provider_config,
    known_providers,
    load_provider_config,
)
from llm_connector.config.defaults import (
    ANTHROPIC_DEFAULT_MODEL,
    LMSTUDIO_DEFAULT_ENDPOINT,
    SILICONFLOW_DEFAULT_ENDPOINT,
)
from llm_connector.config.env import get_env_api_key, get_env_var_candidates, is_placeholder


def test_known_providers_include_kinds_and_presets():
    names = known_providers()
    for name in ("openai", "anthropic", "gemini", "local", "siliconflow", "lmstudio"):
        assert name in names  # nosec B101 - pytest assert in tests


def test_defaults_only():
    cfg = get_provider_config("anthropic")
    assert cfg == {"kind": "anthropic", "model": ANTHROPIC_DEFAULT_MODEL}  # nosec B101 - pytest assert in tests


def test_unknown_provider_name():
    with pytest.raises(UnknownProviderError):
        get_provider_config("nope")


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_MODEL", "claude-x")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
    monkeypatch.setenv("ANTHROPIC_SYSTEM_MESSAGE", "be brief")
    cfg = get_provider_config("anthropic")
    assert cfg["model"] == "claude-x"  # nosec B101 - pytest assert in tests
    assert cfg["api_key"] == "sk-ant"  # nosec B101 - pytest assert in tests
    assert cfg["system_message"] == "be brief"  # nosec B101 - pytest assert in tests


def test_placeholder_values_are_ignored(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "your-key-here")
    assert is_placeholder("your-key-here") is True  # nosec B101 - pytest assert in tests
    assert "api_key" not in get_provider_config("openai")  # nosec B101 - pytest assert in tests


def test_gemini_accepts_google_alias(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
    assert list(get_env_var_candidates("gemini")) == ["GEMINI_API_KEY", "GOOGLE_API_KEY"]  # nosec B101 - pytest assert in tests
    assert get_env_api_key("gemini") == "g-key"  # nosec B101 - pytest assert in tests
    assert get_provider_config("gemini")["api_key"] == "g-key"  # nosec B101 - pytest assert in tests


def test_config_file_json_then_env_then_overrides(monkeypatch, tmp_path):
    path = tmp_path / "connector.json"
    path.write_text(json.dumps({"openai": {"model": "from-file", "system_message": "file sys"}}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    monkeypatch.setenv("OPENAI_SYSTEM_MESSAGE", "env sys")
    cfg = get_provider_config("openai", {"api_key": "k", "base_url": None})
    assert cfg["model"] == "from-file"  # nosec B101 - pytest assert in tests
    assert cfg["system_message"] == "env sys"  # nosec B101 - pytest assert in tests
    assert cfg["api_key"] == "k" and "base_url" not in cfg  # nosec B101 - pytest assert in tests


def test_config_file_yaml(monkeypatch, tmp_path):
    path = tmp_path / "connector.yaml"
    path.write_text("anthropic:\n  model: claude-yaml\n  max_output_tokens: 2048\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    cfg = load_provider_config("anthropic", {"api_key": "k"})
    assert cfg.model == "claude-yaml" and cfg.max_output_tokens == 2048  # nosec B101 - pytest assert in tests


def test_invalid_config_file_raises(monkeypatch, tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("openai: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    with pytest.raises(ConfigError):
        get_provider_config("openai")


def test_presets_resolve_to_openai_kind(monkeypatch):
    monkeypatch.setenv("SILICONFLOW_API_KEY", "sf-key")
    cfg = load_provider_config("siliconflow")
    assert isinstance(cfg, OpenAIConfig)  # nosec B101 - pytest assert in tests
    assert cfg.base_url == SILICONFLOW_DEFAULT_ENDPOINT and cfg.secret() == "sf-key"  # nosec B101 - pytest assert in tests
    # a stray kind override cannot turn a preset into another protocol
    lm = load_provider_config("lmstudio", {"kind": "anthropic", "model": "qwen"})
    assert isinstance(lm, OpenAIConfig) and lm.base_url == LMSTUDIO_DEFAULT_ENDPOINT  # nosec B101 - pytest assert in tests


def test_missing_key_fails_validation():
    with pytest.raises(ConfigError) as info:
        load_provider_config("openai")
    assert info.value.field == "api_key"  # nosec B101 - pytest assert in tests
