"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `llm_connector.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .config_error import ConfigError, UnknownProviderError
from .backend_error import BackendError
from .protocol_error import ProtocolError
from .state_error import StateError
from .decode_warning import DecodeWarning
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigError",
    "UnknownProviderError",
    "BackendError",
    "ProtocolError",
    "StateError",
    "DecodeWarning",
    "classify_exception",
]
