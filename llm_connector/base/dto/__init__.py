"""Pydantic DTOs for the connector boundary."""

from .provider_config import (
    PROVIDER_KINDS,
    AnthropicConfig,
    BaseProviderConfig,
    GeminiConfig,
    LocalConfig,
    OpenAIConfig,
    ProviderConfig,
    RemoteProviderConfig,
    parse_provider_config,
)

__all__ = [
    "PROVIDER_KINDS",
    "AnthropicConfig",
    "BaseProviderConfig",
    "GeminiConfig",
    "LocalConfig",
    "OpenAIConfig",
    "ProviderConfig",
    "RemoteProviderConfig",
    "parse_provider_config",
]
