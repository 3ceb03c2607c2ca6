"""
Connector Base Package

Provider-agnostic building blocks shared by every adapter:

- Models (DTOs): messages, fragments, request/result objects
- Configuration DTOs: the validated ``ProviderConfig`` union
- Errors: normalized taxonomy rooted at ``ProviderError``
- Streaming: SSE decoders and the lazy ``FragmentStream``
- Factory: lazy creation of adapters by configuration kind
"""

from .cancellation import CancellationToken, CancelledError
from .dto import (
    AnthropicConfig,
    BaseProviderConfig,
    GeminiConfig,
    LocalConfig,
    OpenAIConfig,
    ProviderConfig,
    parse_provider_config,
)
from .errors import (
    BackendError,
    ConfigError,
    DecodeWarning,
    ErrorCode,
    ProtocolError,
    ProviderError,
    StateError,
    UnknownProviderError,
)
from .factory import ProviderFactory, create_adapter
from .interfaces import LocalEngine, ProviderAdapter, SupportsModelListing
from .models import (
    ChatRequest,
    ChatResult,
    Message,
    ResponseMeta,
    StreamFragment,
    StreamingResult,
)
from .streaming import FragmentStream
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "CancellationToken",
    "CancelledError",
    "AnthropicConfig",
    "BaseProviderConfig",
    "GeminiConfig",
    "LocalConfig",
    "OpenAIConfig",
    "ProviderConfig",
    "parse_provider_config",
    "BackendError",
    "ConfigError",
    "DecodeWarning",
    "ErrorCode",
    "ProtocolError",
    "ProviderError",
    "StateError",
    "UnknownProviderError",
    "ProviderFactory",
    "create_adapter",
    "LocalEngine",
    "ProviderAdapter",
    "SupportsModelListing",
    "ChatRequest",
    "ChatResult",
    "Message",
    "ResponseMeta",
    "StreamFragment",
    "StreamingResult",
    "FragmentStream",
    "TimeoutConfig",
    "get_timeout_config",
]
