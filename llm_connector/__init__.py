"""llm_connector package

Unified connector for chat-style large language model backends.

Purpose:
    Send a conversation to an OpenAI-compatible, Anthropic, Gemini or local
    in-process backend and receive the answer as one result or as a live
    sequence of text fragments, behind a single client.

Public API (re-exported):
    - Version: ``__version__``
    - Client: :class:`LlmClient`, :class:`ClientRegistry`
    - Connection lifecycle: :class:`ConnectionManager`
    - DTOs: :class:`Message`, :class:`ChatRequest`, :class:`ChatResult`,
      :class:`StreamingResult`, :class:`StreamFragment`
    - Configuration: :func:`parse_provider_config`, :func:`load_provider_config`
    - Factory: :class:`ProviderFactory`, :func:`create_adapter`
    - Errors: :class:`ProviderError` and subclasses, :class:`ErrorCode`
    - Cancellation: :class:`CancellationToken`

Notes:
    - The relay service and CLI live under ``llm_connector.service`` and are
      not imported here.
"""

from .base import (
    AnthropicConfig,
    BackendError,
    CancellationToken,
    CancelledError,
    ChatRequest,
    ChatResult,
    ConfigError,
    DecodeWarning,
    ErrorCode,
    GeminiConfig,
    LocalConfig,
    Message,
    OpenAIConfig,
    ProtocolError,
    ProviderAdapter,
    ProviderConfig,
    ProviderError,
    ProviderFactory,
    StateError,
    StreamFragment,
    StreamingResult,
    UnknownProviderError,
    create_adapter,
    parse_provider_config,
)
from .client import ClientRegistry, LlmClient
from .config import load_provider_config
from .connection import ConnectionManager, ConnectionState, ConnectionStatus

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AnthropicConfig",
    "BackendError",
    "CancellationToken",
    "CancelledError",
    "ChatRequest",
    "ChatResult",
    "ConfigError",
    "DecodeWarning",
    "ErrorCode",
    "GeminiConfig",
    "LocalConfig",
    "Message",
    "OpenAIConfig",
    "ProtocolError",
    "ProviderAdapter",
    "ProviderConfig",
    "ProviderError",
    "ProviderFactory",
    "StateError",
    "StreamFragment",
    "StreamingResult",
    "UnknownProviderError",
    "create_adapter",
    "parse_provider_config",
    "ClientRegistry",
    "LlmClient",
    "load_provider_config",
    "ConnectionManager",
    "ConnectionState",
    "ConnectionStatus",
]
