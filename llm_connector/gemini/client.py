"""GeminiAdapter: Google Generative Language API over HTTP.

Purpose
-------
Send a conversation to ``models/<model>:generateContent`` (or the streaming
``:streamGenerateContent?alt=sse`` variant) and decode the reply into
fragments.

External dependencies
---------------------
- ``httpx`` through ``base.http``; the API key travels as the ``key`` query
  parameter and is redacted from every log line.

Failure modes
-------------
- Non-2xx replies raise ``BackendError``; a reply without
  ``candidates[0].content.parts[0].text`` raises ``ProtocolError``.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx

from ..base.dto import GeminiConfig
from ..base.errors import ConfigError
from ..base.http import ClientHandle, http_fragment_stream, request_json
from ..base.logging import LogContext, get_logger
from ..base.models import MessageLike
from ..base.streaming import FragmentStream, SimpleSSEDecoder, WarningSink
from ..base.timeouts import TimeoutConfig
from ..base.utils import normalize_messages
from ..config.defaults import GEMINI_DEFAULT_BASE_URL
from .helpers import build_contents, extract_single, model_ids, translate_stream_frame


class GeminiAdapter:
    """Adapter for Gemini ``generateContent``."""

    def __init__(
        self,
        config: GeminiConfig,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeouts: Optional[TimeoutConfig] = None,
        on_warning: Optional[WarningSink] = None,
    ) -> None:
        if not isinstance(config, GeminiConfig):
            raise ConfigError("GeminiAdapter requires a GeminiConfig", provider="gemini", field="kind")
        self._config = config
        self._http = ClientHandle(http_client, timeouts=timeouts)
        self._on_warning = on_warning
        self._logger = get_logger("gemini")

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def config(self) -> GeminiConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return (self._config.base_url or GEMINI_DEFAULT_BASE_URL).rstrip("/")

    def endpoint(self, *, stream: bool) -> str:
        if self._config.mode == "proxy":
            return f"{self.base_url}/{self.model}"
        key = quote(self._config.secret() or "", safe="")
        if stream:
            return f"{self.base_url}/models/{self.model}:streamGenerateContent?alt=sse&key={key}"
        return f"{self.base_url}/models/{self.model}:generateContent?key={key}"

    def build_headers(self, *, stream: bool) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "text/event-stream" if stream else "application/json",
            **self._config.extra_headers,
        }

    def build_body(
        self,
        messages: Sequence[MessageLike],
        *,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        contents, instruction = build_contents(
            normalize_messages(messages), self._config.system_message, self._config.system_mode
        )
        body: Dict[str, Any] = {"contents": contents}
        if instruction is not None:
            body["systemInstruction"] = instruction
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
            url=self.endpoint(stream=stream),
            headers=self.build_headers(stream=stream),
            body=self.build_body(messages, overrides=overrides),
            stream=stream,
            decoder_factory=SimpleSSEDecoder,
            translate=translate_stream_frame,
            extract=partial(extract_single, provider=self.provider_name, model=self.model),
            ctx=LogContext(provider=self.provider_name, model=self.model),
            logger=self._logger,
            on_warning=self._on_warning,
        )

    def models_url(self) -> str:
        secret = self._config.secret()
        url = f"{self.base_url}/models"
        return f"{url}?key={quote(secret, safe='')}" if secret else url

    async def list_models(self) -> List[str]:
        payload = await request_json(
            self._http.get(),
            "GET",
            self.models_url(),
            headers={**self._config.extra_headers, "Accept": "application/json"},
            ctx=LogContext(provider=self.provider_name, model=self.model),
            logger=self._logger,
        )
        return model_ids(payload)

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["GeminiAdapter"]
