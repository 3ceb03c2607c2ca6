"""Unified connector error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``llm_connector.base.errors_parts`` to keep a stable import path.

Hierarchy
---------
``ProviderError`` (dataclass exception with a normalized ``ErrorCode``)
    ``ConfigError`` -> ``UnknownProviderError``
    ``BackendError`` (HTTP status + body)
    ``ProtocolError`` (uninterpretable response)
    ``StateError`` (invalid connection transition)

``DecodeWarning`` is a ``UserWarning`` reported for malformed stream frames and
never raised by the decoders.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.config_error import ConfigError, UnknownProviderError
from .errors_parts.backend_error import BackendError
from .errors_parts.protocol_error import ProtocolError
from .errors_parts.state_error import StateError
from .errors_parts.decode_warning import DecodeWarning
from .errors_parts.classification import classify_exception

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
