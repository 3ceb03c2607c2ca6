"""
Relay service: server-side secrets, OpenAI-shaped replies.

Purpose
-------
Let browser or desktop front-ends use proxy mode: the front-end posts an
OpenAI-style request without any key, the relay resolves the server-side
provider configuration (config file and environment, see ``llm_connector.config``)
and re-dispatches through the matching adapter.

Routes
------
- ``GET /api/ai/proxy/health``: ``{"status", "timestamp", "availableProviders"}``
- ``POST /api/ai/proxy``: ``{"provider", "model", "messages", "stream", **extra}``;
  extra fields are forwarded as request-body overrides. Non-streaming replies
  are ``chat.completion`` JSON; streaming replies are ``text/event-stream``
  ``chat.completion.chunk`` deltas followed by ``data: [DONE]``.

Error mapping
-------------
- Unknown provider -> 400
- Server-side configuration invalid (e.g. missing key) -> 500
- ``BackendError`` before the first byte -> upstream status (502 when the
  upstream was unreachable); after the first byte an SSE ``error`` event ends
  the stream.
- ``ProtocolError`` -> 502

External dependencies
---------------------
- FastAPI (routing, ``StreamingResponse``, CORS middleware).
"""

from __future__ import annotations

import json
import os
import time
import uuid
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional, Type

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

from ..base.errors import BackendError, ConfigError, ProtocolError, ProviderError, UnknownProviderError
from ..base.factory import ProviderFactory
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import ChatRequest, ChatResult, StreamingResult
from ..client import LlmClient
from ..config import known_providers, load_provider_config
from ..config.defaults import RELAY_CORS_DEFAULT_ORIGINS, RELAY_DEFAULT_PROVIDER

CORS_ORIGINS_ENV = "LLM_CONNECTOR_CORS_ORIGINS"

_logger = get_logger("relay")


class RelayBody(BaseModel):
    """Inbound OpenAI-style request; unknown fields become body overrides."""

    model_config = ConfigDict(extra="allow")

    provider: str = RELAY_DEFAULT_PROVIDER
    model: Optional[str] = None
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    stream: bool = False

    def overrides(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


def available_providers() -> List[str]:
    """Provider names whose server-side configuration validates."""
    out: List[str] = []
    for name in known_providers():
        try:
            cfg = load_provider_config(name)
        except ConfigError:
            continue
        if cfg.kind == "local" and not getattr(cfg, "engine_factory", None):
            continue
        out.append(name)
    return out


def _completion_id() -> str:
    return f"chatcmpl-{uuid.uuid4().hex[:24]}"


def completion_payload(result: ChatResult, model: str) -> Dict[str, Any]:
    """OpenAI ``chat.completion`` body for an aggregated result."""
    return {
        "id": _completion_id(),
        "object": "chat.completion",
        "created": int(time.time()),
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": result.text},
                "finish_reason": result.stop_reason,
            }
        ],
        "usage": {
            "prompt_tokens": result.usage_input,
            "completion_tokens": result.usage_output,
            "total_tokens": result.usage_input + result.usage_output,
        },
    }


def _sse(data: Any) -> bytes:
    text = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)
    return f"data: {text}\n\n".encode("utf-8")


def _chunk(ident: str, model: str, delta: Dict[str, Any], finish_reason: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": ident,
        "object": "chat.completion.chunk",
        "created": int(time.time()),
        "model": model,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }


def _http_status(err: ProviderError) -> int:
    if isinstance(err, BackendError):
        return err.status_code if 400 <= err.status_code < 600 else 502
    return 502


def _error_body(err: ProviderError) -> Dict[str, Any]:
    return {"error": {"message": err.message, "code": err.code.value, "provider": err.provider}}


async def _relay_stream(result: StreamingResult, client: LlmClient, model: str) -> AsyncIterator[bytes]:
    """Pull the first fragment eagerly so upstream failures map to a status code."""
    fragments = result.fragments
    try:
        first = await fragments.__anext__()
    except StopAsyncIteration:
        first = None
    except BaseException:
        await result.aclose()
        await client.aclose()
        raise

    ident = _completion_id()

    async def _body() -> AsyncIterator[bytes]:
        try:
            yield _sse(_chunk(ident, model, {"role": "assistant"}))
            if first is not None:
                yield _sse(_chunk(ident, model, {"content": first.text}))
                async for fragment in fragments:
                    yield _sse(_chunk(ident, model, {"content": fragment.text}))
            yield _sse(_chunk(ident, model, {}, result.meta.stop_reason or "stop"))
        except ProviderError as exc:
            normalized_log_event(
                _logger,
                "relay.request",
                LogContext(provider=exc.provider, model=model),
                phase="stream",
                error_code=exc.code.value,
                detail=exc.message,
            )
            yield _sse(_error_body(exc))
        finally:
            await result.aclose()
            await client.aclose()
        yield _sse("[DONE]")

    return _body()


def create_app(
    *,
    factory: Type[ProviderFactory] = ProviderFactory,
    adapter_options: Optional[Dict[str, Any]] = None,
    cors_origins: Optional[List[str]] = None,
) -> FastAPI:
    """Build the relay application.

    ``adapter_options`` are forwarded to every adapter constructor (tests pass
    an ``http_client`` bound to a mock transport).
    """
    app = FastAPI(title="LLM Connector Relay", version="0.1.0")

    if cors_origins is None:
        raw = os.getenv(CORS_ORIGINS_ENV, RELAY_CORS_DEFAULT_ORIGINS)
        cors_origins = [o.strip() for o in raw.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    options = dict(adapter_options or {})

    @app.get("/api/ai/proxy/health")
    def health() -> Dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "availableProviders": available_providers(),
        }

    @app.post("/api/ai/proxy")
    async def relay(body: RelayBody):
        streaming = body.stream
        ctx = LogContext(provider=body.provider, model=body.model)
        try:
            cfg = load_provider_config(
                body.provider,
                {"model": body.model, "response_format": "stream" if streaming else "single"},
            )
            adapter = factory.create(cfg, **options)
        except UnknownProviderError as exc:
            raise HTTPException(status_code=400, detail=exc.message) from exc
        except ConfigError as exc:
            normalized_log_event(_logger, "relay.request", ctx, phase="config", error_code=exc.code.value, detail=exc.message)
            raise HTTPException(status_code=500, detail=exc.message) from exc

        ctx = LogContext(provider=body.provider, model=cfg.model)
        normalized_log_event(_logger, "relay.request", ctx, phase="dispatch", stream=streaming)
        client = LlmClient(adapter)
        request = ChatRequest(messages=body.messages, stream=streaming, overrides=body.overrides())

        if not streaming:
            try:
                result = await client.chat(request)
            except (BackendError, ProtocolError) as exc:
                normalized_log_event(_logger, "relay.request", ctx, phase="response", error_code=exc.code.value)
                return JSONResponse(status_code=_http_status(exc), content=_error_body(exc))
            finally:
                await client.aclose()
            return completion_payload(result, cfg.model)  # type: ignore[arg-type]

        result = await client.chat(request)
        try:
            stream = await _relay_stream(result, client, cfg.model)  # type: ignore[arg-type]
        except (BackendError, ProtocolError) as exc:
            normalized_log_event(_logger, "relay.request", ctx, phase="response", error_code=exc.code.value)
            return JSONResponse(status_code=_http_status(exc), content=_error_body(exc))
        return StreamingResponse(
            stream,
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    return app


app = create_app()


__all__ = ["RelayBody", "app", "available_providers", "completion_payload", "create_app"]
