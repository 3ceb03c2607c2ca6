"""AnthropicAdapter: Anthropic Messages API over HTTP.

Request
-------
- Endpoint: ``base_url`` or the Anthropic default in direct mode;
  ``base_url`` (required) in proxy mode.
- Headers: JSON content type, ``Accept`` by response format, extra headers;
  direct mode adds ``x-api-key`` and ``anthropic-version``.
- Body: ``{"messages", <max tokens field>, "stream", "model"}`` plus
  ``"system"`` when any system text exists, then ``extra_body`` and
  per-call overrides.

Reply
-----
- Streaming: typed SSE, see ``stream_helpers.translate_event``.
- Single: ``content[0].text`` as the only fragment.
"""

from __future__ import annotations

import re
from functools import partial
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..base.dto import AnthropicConfig
from ..base.errors import ConfigError
from ..base.http import ClientHandle, http_fragment_stream, request_json
from ..base.logging import LogContext, get_logger
from ..base.models import MessageLike
from ..base.streaming import FragmentStream, TypedSSEDecoder, WarningSink
from ..base.timeouts import TimeoutConfig
from ..base.utils import normalize_messages
from ..config.defaults import ANTHROPIC_DEFAULT_ENDPOINT
from .stream_helpers import extract_single, model_ids, split_conversation, translate_event


class AnthropicAdapter:
    """Adapter for the Anthropic Messages API."""

    def __init__(
        self,
        config: AnthropicConfig,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeouts: Optional[TimeoutConfig] = None,
        on_warning: Optional[WarningSink] = None,
    ) -> None:
        if not isinstance(config, AnthropicConfig):
            raise ConfigError("AnthropicAdapter requires an AnthropicConfig", provider="anthropic", field="kind")
        self._config = config
        self._http = ClientHandle(http_client, timeouts=timeouts)
        self._on_warning = on_warning
        self._logger = get_logger("anthropic")

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def config(self) -> AnthropicConfig:
        return self._config

    @property
    def endpoint(self) -> str:
        if self._config.mode == "proxy":
            return self._config.base_url  # type: ignore[return-value]
        return self._config.base_url or ANTHROPIC_DEFAULT_ENDPOINT

    def _auth_headers(self) -> Dict[str, str]:
        secret = self._config.secret()
        if not secret:
            return {}
        return {"x-api-key": secret, "anthropic-version": self._config.anthropic_version}

    def build_headers(self, *, stream: bool) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "text/event-stream" if stream else "application/json",
            **self._config.extra_headers,
            **self._auth_headers(),
        }

    def build_body(
        self,
        messages: Sequence[MessageLike],
        *,
        stream: bool,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        system, wire = split_conversation(normalize_messages(messages), self._config.system_message)
        body: Dict[str, Any] = {
            "messages": wire,
            self._config.max_tokens_field: self._config.max_output_tokens,
            "stream": stream,
            "model": self._config.model,
        }
        if system:
            body["system"] = system
        body.update(self._config.extra_body)
        body.update(overrides or {})
        return body

    def send_messages(
        self,
        messages: Sequence[MessageLike],
        overrides: Optional[Dict[str, Any]] = None,
    ) -> FragmentStream:
        stream = self._config.streaming
        return http_fragment_stream(
            self._http.get,
            url=self.endpoint,
            headers=self.build_headers(stream=stream),
            body=self.build_body(messages, stream=stream, overrides=overrides),
            stream=stream,
            decoder_factory=TypedSSEDecoder,
            translate=partial(translate_event, provider=self.provider_name, model=self.model),
            extract=partial(extract_single, provider=self.provider_name, model=self.model),
            ctx=LogContext(provider=self.provider_name, model=self.model),
            logger=self._logger,
            on_warning=self._on_warning,
        )

    def models_url(self) -> str:
        root = re.sub(r"/messages/?$", "", self.endpoint.rstrip("/"))
        return f"{root}/models"

    async def list_models(self) -> List[str]:
        """GET ``<root>/models`` and return ``data[].id``."""
        headers = {**self._config.extra_headers, **self._auth_headers(), "Accept": "application/json"}
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


__all__ = ["AnthropicAdapter"]
