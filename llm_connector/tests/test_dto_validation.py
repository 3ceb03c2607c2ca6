"""Provider configuration validation (tagged union on ``kind``)."""
from __future__ import annotations

import pytest

from llm_connector.base.dto import (
    AnthropicConfig,
    GeminiConfig,
    LocalConfig,
    OpenAIConfig,
    parse_provider_config,
)
from llm_connector.base.errors import ConfigError, UnknownProviderError


def test_openai_direct_config_round_trips_fields():
    cfg = parse_provider_config(
        {"kind": "openai", "model": " gpt-4o ", "api_key": "sk-1", "system_message": "   "}
    )
    assert isinstance(cfg, OpenAIConfig)  # nosec B101 - pytest assert in tests
    assert cfg.model == "gpt-4o"  # nosec B101 - pytest assert in tests
    assert cfg.mode == "direct" and cfg.secret() == "sk-1"  # nosec B101 - pytest assert in tests
    assert cfg.system_message is None  # nosec B101 - pytest assert in tests
    assert cfg.streaming is True  # nosec B101 - pytest assert in tests
    assert "sk-1" not in repr(cfg)  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize(
    "data,message,field",
    [
        ({"kind": "openai", "model": "m"}, "API key is required for direct mode.", "api_key"),
        ({"kind": "openai", "model": "m", "api_key": "  "}, "API key is required for direct mode.", "api_key"),
        ({"kind": "gemini", "model": "m", "mode": "proxy"}, "Base URL is required for proxy mode.", "base_url"),
        ({"kind": "anthropic", "model": "", "api_key": "k"}, "Model is required.", "model"),
        ({"kind": "local"}, "Model is required.", "model"),
        ({"kind": "openai", "api_key": "k"}, "Model is required.", "model"),
        ({"kind": "gemini", "model": "   ", "api_key": "k"}, "Model is required.", "model"),
        ({"kind": "openai", "model": "m", "mode": "proxy"}, "Base URL is required for proxy mode.", "base_url"),
        ({"kind": "anthropic", "model": "m", "mode": "proxy", "base_url": " "}, "Base URL is required for proxy mode.", "base_url"),
        (
            {"kind": "anthropic", "model": "m", "api_key": "k", "max_output_tokens": "abc"},
            "Max output tokens must be an integer.",
            "max_output_tokens",
        ),
    ],
)
def test_invalid_configs_raise_config_error(data, message, field):
    with pytest.raises(ConfigError) as info:
        parse_provider_config(data)
    assert info.value.message == message  # nosec B101 - pytest assert in tests
    assert info.value.field == field  # nosec B101 - pytest assert in tests


def test_missing_and_unknown_kind():
    with pytest.raises(ConfigError, match="Provider kind is required"):
        parse_provider_config({"model": "m"})
    with pytest.raises(UnknownProviderError):
        parse_provider_config({"kind": "cohere", "model": "m"})


def test_proxy_mode_never_exposes_secret():
    cfg = parse_provider_config(
        {"kind": "openai", "model": "m", "mode": "proxy", "base_url": "http://relay/api", "api_key": "k"}
    )
    assert cfg.secret() is None  # nosec B101 - pytest assert in tests


def test_extra_headers_and_body_accept_json_text():
    cfg = parse_provider_config(
        {
            "kind": "openai",
            "model": "m",
            "api_key": "k",
            "extra_headers": '{"X-Trace": 7}',
            "extra_body": '{"temperature": 0.2}',
        }
    )
    assert cfg.extra_headers == {"X-Trace": "7"}  # nosec B101 - pytest assert in tests
    assert cfg.extra_body == {"temperature": 0.2}  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize("value", ["{not json", "[1, 2]"])
def test_malformed_extra_headers_are_rejected(value):
    with pytest.raises(ConfigError) as info:
        parse_provider_config({"kind": "openai", "model": "m", "api_key": "k", "extra_headers": value})
    assert info.value.field == "extra_headers"  # nosec B101 - pytest assert in tests


def test_response_format_json_alias_means_single():
    cfg = parse_provider_config({"kind": "openai", "model": "m", "api_key": "k", "response_format": "JSON"})
    assert cfg.response_format == "single" and cfg.streaming is False  # nosec B101 - pytest assert in tests


def test_anthropic_defaults_and_token_limit():
    cfg = parse_provider_config({"kind": "anthropic", "model": "claude", "api_key": "k"})
    assert isinstance(cfg, AnthropicConfig)  # nosec B101 - pytest assert in tests
    assert cfg.max_output_tokens == 1024  # nosec B101 - pytest assert in tests
    assert cfg.anthropic_version == "2023-06-01"  # nosec B101 - pytest assert in tests
    assert cfg.max_tokens_field == "max_output_tokens"  # nosec B101 - pytest assert in tests
    assert parse_provider_config(
        {"kind": "anthropic", "model": "c", "api_key": "k", "max_output_tokens": " 512 "}
    ).max_output_tokens == 512  # nosec B101 - pytest assert in tests
    with pytest.raises(ConfigError):
        parse_provider_config({"kind": "anthropic", "model": "c", "api_key": "k", "max_output_tokens": 0})


def test_gemini_and_local_specific_fields():
    gem = parse_provider_config({"kind": "gemini", "model": "g", "api_key": "k"})
    assert isinstance(gem, GeminiConfig) and gem.system_mode == "prepend"  # nosec B101 - pytest assert in tests
    loc = parse_provider_config({"kind": "local", "model": "tiny", "engine_config": '{"threads": 2}'})
    assert isinstance(loc, LocalConfig)  # nosec B101 - pytest assert in tests
    assert loc.engine_config == {"threads": 2} and loc.eager_init is False  # nosec B101 - pytest assert in tests
    assert not hasattr(loc, "api_key")  # nosec B101 - pytest assert in tests


def test_validated_config_passes_through():
    cfg = parse_provider_config({"kind": "openai", "model": "m", "api_key": "k"})
    assert parse_provider_config(cfg) is cfg  # nosec B101 - pytest assert in tests
