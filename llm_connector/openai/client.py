"""OpenAIAdapter: OpenAI-compatible chat completions over HTTP.

Speaks the ``/v1/chat/completions`` wire protocol directly with ``httpx``,
so it also serves OpenAI-compatible backends (SiliconFlow, LM Studio, the
relay service in proxy mode).

Request
-------
- Endpoint: ``base_url`` (full chat-completions URL) or the OpenAI default.
- Headers: JSON content type, ``Accept`` by response format, extra headers,
  and ``Authorization: Bearer <key>`` in direct mode only.
- Body: ``{"messages", "model", "stream", **extra_body, **overrides}`` with
  the configured system message prepended as a ``system`` turn.

Reply
-----
- Streaming: simple SSE; text at ``choices[0].delta.content``; ``[DONE]`` ends.
- Single: ``choices[0].message.content`` as the only fragment.
"""

from __future__ import annotations

import re
from functools import partial
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..base.dto import OpenAIConfig
from ..base.errors import ConfigError
from ..base.http import ClientHandle, http_fragment_stream, request_json
from ..base.logging import LogContext, get_logger
from ..base.models import MessageLike
from ..base.streaming import FragmentStream, SimpleSSEDecoder, WarningSink
from ..base.timeouts import TimeoutConfig
from ..base.utils import normalize_messages
from ..config.defaults import OPENAI_DEFAULT_ENDPOINT
from .translate import extract_single, model_ids, to_wire_messages, translate_stream_frame


class OpenAIAdapter:
    """Adapter for OpenAI-compatible chat completion endpoints."""

    def __init__(
        self,
        config: OpenAIConfig,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeouts: Optional[TimeoutConfig] = None,
        on_warning: Optional[WarningSink] = None,
    ) -> None:
        if not isinstance(config, OpenAIConfig):
            raise ConfigError("OpenAIAdapter requires an OpenAIConfig", provider="openai", field="kind")
        self._config = config
        self._http = ClientHandle(http_client, timeouts=timeouts)
        self._on_warning = on_warning
        self._logger = get_logger("openai")

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def config(self) -> OpenAIConfig:
        return self._config

    @property
    def endpoint(self) -> str:
        return self._config.base_url or OPENAI_DEFAULT_ENDPOINT

    def build_headers(self, *, stream: bool) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream" if stream else "application/json",
            **self._config.extra_headers,
        }
        secret = self._config.secret()
        if secret:
            headers["Authorization"] = f"Bearer {secret}"
        return headers

    def build_body(
        self,
        messages: Sequence[MessageLike],
        *,
        stream: bool,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return {
            "messages": to_wire_messages(normalize_messages(messages), self._config.system_message),
            "model": self._config.model,
            "stream": stream,
            **self._config.extra_body,
            **(overrides or {}),
        }

    def send_messages(
        self,
        messages: Sequence[MessageLike],
        overrides: Optional[Dict[str, Any]] = None,
    ) -> FragmentStream:
        stream = self._config.streaming
        ctx = LogContext(provider=self.provider_name, model=self.model)
        return http_fragment_stream(
            self._http.get,
            url=self.endpoint,
            headers=self.build_headers(stream=stream),
            body=self.build_body(messages, stream=stream, overrides=overrides),
            stream=stream,
            decoder_factory=SimpleSSEDecoder,
            translate=translate_stream_frame,
            extract=partial(extract_single, provider=self.provider_name, model=self.model),
            ctx=ctx,
            logger=self._logger,
            on_warning=self._on_warning,
        )

    def models_url(self) -> str:
        root = re.sub(r"/chat/.*$", "", self.endpoint.rstrip("/"))
        return f"{root}/models"

    async def list_models(self) -> List[str]:
        """GET ``<root>/models`` and return ``data[].id``."""
        headers = self.build_headers(stream=False)
        headers.pop("Content-Type", None)
        payload = await request_json(
            self._http.get(),
            "GET",
            self.models_url(),
            headers=headers,
            ctx=LogContext(provider=self.provider_name, model=self.model),
            logger=self._logger,
        )
        return model_ids(payload)

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["OpenAIAdapter"]
