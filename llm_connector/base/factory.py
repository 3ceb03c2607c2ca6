"""Provider Factory.

Purpose
-------
Turn a provider configuration into the matching adapter instance. The
configuration is validated first, so an adapter is never constructed from
unvalidated input. Adapter modules are imported lazily with ``importlib`` so
that importing the factory does not pull in every backend.

Failure modes
-------------
- ``ConfigError`` when the configuration does not validate.
- ``UnknownProviderError`` when the kind has no registered adapter, the
  adapter module cannot be imported, or the class is missing.
- Constructor errors of the adapter itself propagate unchanged (adapters
  raise ``ConfigError`` for their own preconditions).
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Mapping, Type, Union

from .dto import BaseProviderConfig, parse_provider_config
from .errors import UnknownProviderError
from .interfaces import ProviderAdapter


def create_adapter(config: Union[BaseProviderConfig, Mapping[str, Any]], **kwargs: Any) -> ProviderAdapter:
    """Shortcut for :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(config, **kwargs)


class ProviderFactory:
    """Create adapters keyed by configuration ``kind``.

    ``adapter_kwargs`` given to :meth:`create` are forwarded to the adapter
    constructor (e.g. ``http_client=`` for networked adapters,
    ``engine_factory=`` for the local runtime).
    """

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "llm_connector.openai.client", "class": "OpenAIAdapter"},
        "anthropic": {"module": "llm_connector.anthropic.client", "class": "AnthropicAdapter"},
        "gemini": {"module": "llm_connector.gemini.client", "class": "GeminiAdapter"},
        "local": {"module": "llm_connector.local.client", "class": "LocalAdapter"},
    }

    @classmethod
    def kinds(cls) -> list[str]:
        return sorted(cls._PROVIDERS)

    @classmethod
    def resolve(cls, kind: str) -> Type:
        """Return the adapter class registered for ``kind``."""
        name = (kind or "").lower().strip()
        spec = cls._PROVIDERS.get(name)
        if not spec:
            raise UnknownProviderError(f"Unknown provider '{kind}'", provider=name or "unknown")

        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{kind}': {exc}", provider=name
            ) from exc
        try:
            return getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{kind}'",
                provider=name,
            ) from exc

    @classmethod
    def create(
        cls,
        config: Union[BaseProviderConfig, Mapping[str, Any]],
        **adapter_kwargs: Any,
    ) -> ProviderAdapter:
        """Validate ``config`` and build the adapter for its kind."""
        validated = parse_provider_config(config)
        klass = cls.resolve(validated.kind)
        return klass(validated, **adapter_kwargs)


__all__ = ["ProviderFactory", "UnknownProviderError", "create_adapter"]
