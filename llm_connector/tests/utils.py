"""Shared helpers for adapter tests: mock transports and byte streams."""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Callable, Iterable, List, Optional

import httpx


async def byte_stream(parts: Iterable[bytes]) -> AsyncIterator[bytes]:
    """Yield ``parts`` one by one so tests control chunk boundaries."""
    for part in parts:
        yield part


def split_every(data: bytes, size: int) -> List[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def sse_lines(*payloads: Any, done: bool = True) -> bytes:
    """OpenAI/Gemini style body: one ``data:`` line per payload."""
    out = b""
    for payload in payloads:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        out += f"data: {text}\n\n".encode("utf-8")
    if done:
        out += b"data: [DONE]\n\n"
    return out


def typed_events(*events: tuple[str, Any]) -> bytes:
    """Anthropic style body: ``event:`` plus ``data:`` per frame."""
    out = b""
    for name, payload in events:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        out += f"event: {name}\ndata: {text}\n\n".encode("utf-8")
    return out


class Recorder:
    """Mock transport handler that records requests and replays canned responses."""

    def __init__(
        self,
        *,
        status: int = 200,
        body: bytes = b"",
        json_body: Any = None,
        chunks: Optional[List[bytes]] = None,
        responder: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> None:
        self.status = status
        self.body = body
        self.json_body = json_body
        self.chunks = chunks
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responder is not None:
            return self.responder(request)
        if self.json_body is not None:
            return httpx.Response(self.status, json=self.json_body)
        if self.chunks is not None:
            return httpx.Response(self.status, content=byte_stream(list(self.chunks)))
        return httpx.Response(self.status, content=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
