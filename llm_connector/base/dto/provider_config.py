"""Validated provider configuration (tagged union on ``kind``).

Purpose
-------
Describe everything an adapter needs to talk to one backend and reject
incomplete configurations before any network activity. Adapters are only
ever built from instances of these models.

External dependencies
---------------------
- Pydantic v2 for validation; ``SecretStr`` keeps API keys out of ``repr``
  and serialized dumps.

Rules
-----
- ``model`` is required (stripped, non-empty) for every kind.
- Networked kinds (``openai``, ``anthropic``, ``gemini``) have a ``mode``:
  ``direct`` requires ``api_key`` (``base_url`` optional override);
  ``proxy`` requires ``base_url`` and never sends a secret.
- ``local`` has no mode, endpoint or secret.
- ``extra_headers``/``extra_body`` accept mappings or JSON object text; header
  values are coerced to strings.
- ``response_format`` is ``stream`` or ``single`` (``json`` is accepted as an
  alias of ``single``).

Failure modes
-------------
:func:`parse_provider_config` converts every validation failure into
``ConfigError`` (``UnknownProviderError`` for an unknown ``kind``); raw
``pydantic.ValidationError`` never escapes this module.
"""
from __future__ import annotations

import json
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from ..errors import ConfigError, UnknownProviderError

PROVIDER_KINDS = ("openai", "anthropic", "gemini", "local")

DEFAULT_MAX_OUTPUT_TOKENS = 1024
DEFAULT_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS_FIELD = "max_output_tokens"


def _config_error(field: str, message: str) -> PydanticCustomError:
    return PydanticCustomError("connector_config", message, {"field": field})


def _parse_json_object(value: Any, label: str, field: str) -> Dict[str, Any]:
    """Accept a mapping or JSON object text; blank/None become ``{}``."""
    if value is None:
        return {}
    if isinstance(value, str):
        if not value.strip():
            return {}
        try:
            value = json.loads(value)
        except ValueError as exc:
            raise _config_error(field, f"{label} JSON parse error: {exc}") from exc
    if not isinstance(value, Mapping):
        raise _config_error(field, f"{label} must be a JSON object.")
    return dict(value)


class BaseProviderConfig(BaseModel):
    """Fields shared by every provider kind."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    kind: str
    model: str = Field(default="", validate_default=True)
    system_message: Optional[str] = None
    response_format: Literal["stream", "single"] = "stream"
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    extra_body: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("model", mode="before")
    @classmethod
    def _require_model(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        if not text:
            raise _config_error("model", "Model is required.")
        return text

    @field_validator("system_message", mode="before")
    @classmethod
    def _blank_system_message(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value)
        return text if text.strip() else None

    @field_validator("response_format", mode="before")
    @classmethod
    def _normalize_format(cls, value: Any) -> Any:
        if value is None:
            return "stream"
        text = str(value).strip().lower()
        return "single" if text == "json" else text

    @field_validator("extra_headers", mode="before")
    @classmethod
    def _parse_headers(cls, value: Any) -> Dict[str, str]:
        parsed = _parse_json_object(value, "Extra headers", "extra_headers")
        return {str(k): str(v) for k, v in parsed.items()}

    @field_validator("extra_body", mode="before")
    @classmethod
    def _parse_body(cls, value: Any) -> Dict[str, Any]:
        return _parse_json_object(value, "Extra body", "extra_body")

    @property
    def streaming(self) -> bool:
        return self.response_format == "stream"


class RemoteProviderConfig(BaseProviderConfig):
    """Networked backend: direct (secret held by the caller) or proxy (relay)."""

    mode: Literal["direct", "proxy"] = "direct"
    api_key: Optional[SecretStr] = None
    base_url: Optional[str] = None

    @field_validator("mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value: Any) -> Any:
        return "direct" if value is None else str(value).strip().lower()

    @field_validator("api_key", "base_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @model_validator(mode="after")
    def _check_mode_requirements(self) -> "RemoteProviderConfig":
        if self.mode == "direct" and self.api_key is None:
            raise _config_error("api_key", "API key is required for direct mode.")
        if self.mode == "proxy" and not self.base_url:
            raise _config_error("base_url", "Base URL is required for proxy mode.")
        return self

    def secret(self) -> Optional[str]:
        """Return the API key in direct mode; proxy mode never exposes one."""
        if self.mode != "direct" or self.api_key is None:
            return None
        return self.api_key.get_secret_value()


class OpenAIConfig(RemoteProviderConfig):
    kind: Literal["openai"] = "openai"


class AnthropicConfig(RemoteProviderConfig):
    kind: Literal["anthropic"] = "anthropic"
    max_output_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, ge=1)
    anthropic_version: str = DEFAULT_ANTHROPIC_VERSION
    max_tokens_field: str = DEFAULT_MAX_TOKENS_FIELD

    @field_validator("max_output_tokens", mode="before")
    @classmethod
    def _parse_max_tokens(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_MAX_OUTPUT_TOKENS
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError as exc:
                raise _config_error("max_output_tokens", "Max output tokens must be an integer.") from exc
        return value


class GeminiConfig(RemoteProviderConfig):
    kind: Literal["gemini"] = "gemini"
    system_mode: Literal["prepend", "instruction"] = "prepend"


class LocalConfig(BaseProviderConfig):
    """In-process inference engine; no endpoint and no secret."""

    kind: Literal["local"] = "local"
    engine_config: Dict[str, Any] = Field(default_factory=dict)
    completion_options: Dict[str, Any] = Field(default_factory=dict)
    engine_factory: Optional[str] = None
    eager_init: bool = False

    @field_validator("engine_config", mode="before")
    @classmethod
    def _parse_engine_config(cls, value: Any) -> Dict[str, Any]:
        return _parse_json_object(value, "Engine config", "engine_config")

    @field_validator("completion_options", mode="before")
    @classmethod
    def _parse_completion_options(cls, value: Any) -> Dict[str, Any]:
        return _parse_json_object(value, "Completion options", "completion_options")


ProviderConfig = Annotated[
    Union[OpenAIConfig, AnthropicConfig, GeminiConfig, LocalConfig],
    Field(discriminator="kind"),
]

_PROVIDER_CONFIG_ADAPTER: TypeAdapter = TypeAdapter(ProviderConfig)


def _first_error(exc: ValidationError) -> tuple[str, Optional[str]]:
    err = exc.errors()[0]
    ctx = err.get("ctx") or {}
    field = ctx.get("field")
    if field is None:
        names = [p for p in err.get("loc", ()) if isinstance(p, str) and p not in PROVIDER_KINDS]
        field = names[-1] if names else None
    message = err.get("msg", str(exc))
    if field and err.get("type") != "connector_config":
        message = f"{field}: {message}"
    return message, field


def parse_provider_config(data: Union[BaseProviderConfig, Mapping[str, Any]]) -> BaseProviderConfig:
    """Validate ``data`` into a concrete provider config.

    Raises:
        UnknownProviderError: ``kind`` is not one of :data:`PROVIDER_KINDS`.
        ConfigError: Any other validation failure.
    """
    if isinstance(data, BaseProviderConfig):
        return data
    if not isinstance(data, Mapping):
        raise ConfigError("Provider configuration must be a mapping.")
    kind = str(data.get("kind") or "").strip().lower()
    model = data.get("model")
    if not kind:
        raise ConfigError("Provider kind is required.", field="kind")
    if kind not in PROVIDER_KINDS:
        raise UnknownProviderError(f"Unknown provider kind '{kind}'", provider=kind, field="kind")
    try:
        return _PROVIDER_CONFIG_ADAPTER.validate_python({**data, "kind": kind})
    except ValidationError as exc:
        message, field = _first_error(exc)
        raise ConfigError(message, provider=kind, model=model if isinstance(model, str) else None, field=field) from exc


__all__ = [
    "PROVIDER_KINDS",
    "DEFAULT_ANTHROPIC_VERSION",
    "DEFAULT_MAX_OUTPUT_TOKENS",
    "DEFAULT_MAX_TOKENS_FIELD",
    "BaseProviderConfig",
    "RemoteProviderConfig",
    "OpenAIConfig",
    "AnthropicConfig",
    "GeminiConfig",
    "LocalConfig",
    "ProviderConfig",
    "parse_provider_config",
]
