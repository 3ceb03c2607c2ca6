"""LocalAdapter: in-process inference engine behind the adapter contract.

Purpose
-------
Run a chat completion on an engine living in the same process (for example a
llama.cpp or MLC binding) and expose the reply as the same lazy fragment
sequence the networked adapters return. No network traffic is issued.

Engine lifecycle
----------------
- The engine is built by an *engine factory* ``factory(model, engine_config)``
  (sync or async). It is passed explicitly (``engine_factory=``) or resolved
  from the config's ``engine_factory`` dotted path ``"package.module:callable"``.
- Creation happens once, on first use or through :meth:`initialize`, under an
  ``asyncio.Lock``.
- :meth:`aclose` disposes the engine (``aclose`` or ``close`` when present).

Failure modes
-------------
- ``ConfigError`` at construction when no engine factory is available or the
  dotted path cannot be resolved.
- ``ProtocolError`` when a non-streaming completion carries no text.
- Engine exceptions propagate unchanged from the fragment pull.
"""

from __future__ import annotations

import asyncio
import inspect
from importlib import import_module
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Sequence

from ..base.dto import LocalConfig
from ..base.errors import ConfigError, ProtocolError
from ..base.interfaces import LocalEngine
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import MessageLike, ResponseMeta
from ..base.streaming import FragmentStream
from ..base.utils import dig, map_openai_role, normalize_messages, text_at

EngineFactory = Callable[[str, Dict[str, Any]], Any]

NO_TEXT_CANDIDATE = "unexpected response shape, no text candidate"


def resolve_engine_factory(path: str) -> EngineFactory:
    """Import ``"package.module:callable"`` and return the callable."""
    module_path, _, attr = path.partition(":")
    if not module_path or not attr:
        raise ConfigError(
            f"Engine factory '{path}' must look like 'package.module:callable'",
            provider="local",
            field="engine_factory",
        )
    try:
        factory = getattr(import_module(module_path), attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigError(
            f"Cannot load engine factory '{path}': {exc}", provider="local", field="engine_factory"
        ) from exc
    if not callable(factory):
        raise ConfigError(f"Engine factory '{path}' is not callable", provider="local", field="engine_factory")
    return factory


def _record_chunk_meta(chunk: Any, meta: ResponseMeta) -> None:
    meta.raw = chunk
    finish = dig(chunk, "choices", 0, "finish_reason")
    if isinstance(finish, str):
        meta.stop_reason = finish
    meta.record_usage(dig(chunk, "usage", "prompt_tokens"), dig(chunk, "usage", "completion_tokens"))


class LocalAdapter:
    """Adapter around a locally hosted engine exposing ``create_chat_completion``."""

    def __init__(
        self,
        config: LocalConfig,
        *,
        engine_factory: Optional[EngineFactory] = None,
        engine: Optional[LocalEngine] = None,
    ) -> None:
        if not isinstance(config, LocalConfig):
            raise ConfigError("LocalAdapter requires a LocalConfig", provider="local", field="kind")
        self._config = config
        if engine is None and engine_factory is None:
            if not config.engine_factory:
                raise ConfigError(
                    "Local runtime requires an engine factory.", provider="local", model=config.model,
                    field="engine_factory",
                )
            engine_factory = resolve_engine_factory(config.engine_factory)
        self._factory = engine_factory
        self._engine = engine
        self._lock = asyncio.Lock()
        self._logger = get_logger("local")

    @property
    def provider_name(self) -> str:
        return "local"

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def config(self) -> LocalConfig:
        return self._config

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    async def initialize(self) -> LocalEngine:
        """Create the engine once; later calls return the same instance."""
        async with self._lock:
            if self._engine is None:
                engine = self._factory(self.model, dict(self._config.engine_config))  # type: ignore[misc]
                if inspect.isawaitable(engine):
                    engine = await engine
                if not isinstance(engine, LocalEngine):
                    raise ConfigError(
                        "Engine factory returned an object without create_chat_completion",
                        provider="local", model=self.model, field="engine_factory",
                    )
                self._engine = engine
                normalized_log_event(
                    self._logger,
                    "engine.init",
                    LogContext(provider=self.provider_name, model=self.model),
                    phase="init",
                )
        return self._engine

    def build_body(
        self,
        messages: Sequence[MessageLike],
        *,
        stream: bool,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        wire = [{"role": map_openai_role(m.role), "content": m.content} for m in normalize_messages(messages)]
        if self._config.system_message:
            wire.insert(0, {"role": "system", "content": self._config.system_message})
        return {
            "messages": wire,
            "stream": stream,
            **self._config.completion_options,
            **(overrides or {}),
        }

    def send_messages(
        self,
        messages: Sequence[MessageLike],
        overrides: Optional[Dict[str, Any]] = None,
    ) -> FragmentStream:
        stream = self._config.streaming
        body = self.build_body(messages, stream=stream, overrides=overrides)
        ctx = LogContext(provider=self.provider_name, model=self.model)

        async def _source(meta: ResponseMeta) -> AsyncIterator[str]:
            engine = await self.initialize()
            reply = engine.create_chat_completion(body)
            if inspect.isawaitable(reply):
                reply = await reply
            emitted = 0
            if hasattr(reply, "__aiter__"):
                async for chunk in reply:
                    _record_chunk_meta(chunk, meta)
                    text = text_at(chunk, "choices", 0, "delta", "content")
                    if text:
                        emitted += 1
                        yield text
            elif _is_chunk_iterable(reply):
                for chunk in reply:
                    _record_chunk_meta(chunk, meta)
                    text = text_at(chunk, "choices", 0, "delta", "content")
                    if text:
                        emitted += 1
                        yield text
            else:
                _record_chunk_meta(reply, meta)
                text = text_at(reply, "choices", 0, "message", "content")
                if text is None:
                    raise ProtocolError(NO_TEXT_CANDIDATE, provider=self.provider_name, model=self.model, raw=reply)
                emitted = 1
                yield text
            normalized_log_event(
                self._logger,
                "stream.end",
                ctx,
                phase="finalize",
                emitted=emitted,
                tokens=meta.tokens(),
                stop_reason=meta.stop_reason,
                stream=stream,
            )

        return FragmentStream(_source, provider=self.provider_name, model=self.model)

    async def list_models(self) -> List[str]:
        """Local engines serve exactly the configured model; nothing to discover."""
        return []

    async def aclose(self) -> None:
        engine, self._engine = self._engine, None
        if engine is None:
            return
        closer = getattr(engine, "aclose", None) or getattr(engine, "close", None)
        if closer is not None:
            result = closer()
            if inspect.isawaitable(result):
                await result


def _is_chunk_iterable(reply: Any) -> bool:
    """Iterables of chunks, excluding mappings and strings (a single completion)."""
    if isinstance(reply, (dict, str, bytes)):
        return False
    return hasattr(reply, "__iter__") and dig(reply, "choices") is None


__all__ = ["EngineFactory", "LocalAdapter", "resolve_engine_factory"]
