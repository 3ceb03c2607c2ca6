"""Async HTTP client construction for adapters.

Purpose:
    Build ``httpx.AsyncClient`` instances configured from
    :func:`get_timeout_config`. Each adapter that is not handed a client
    creates exactly one through :func:`build_async_client` and closes it in
    its ``aclose``; clients passed in by the caller stay owned by the caller.

External dependencies:
    - ``httpx`` for the async client and pluggable transports (tests inject
      ``httpx.MockTransport``).

Timeout strategy:
    - Connect/write/pool are bounded; read is unbounded by default so that
      slow streams are never cut by the connector (see ``base.timeouts``).
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..timeouts import TimeoutConfig, get_timeout_config


def build_async_client(
    timeouts: Optional[TimeoutConfig] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` using the connector timeout policy.

    Parameters:
        timeouts: Explicit timeout values; defaults to ``get_timeout_config()``.
        transport: Optional transport override (mock transports in tests).
    """
    cfg = timeouts or get_timeout_config()
    return httpx.AsyncClient(timeout=cfg.to_httpx(), transport=transport)


class ClientHandle:
    """Lazily created, optionally owned ``httpx.AsyncClient``.

    A client supplied by the caller is used as-is and never closed here; a
    client created on demand is owned and closed by :meth:`aclose`.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeouts: Optional[TimeoutConfig] = None,
    ) -> None:
        self._client = client
        self._owned = client is None
        self._timeouts = timeouts

    @property
    def owned(self) -> bool:
        return self._owned

    def get(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(self._timeouts)
        return self._client

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None and self._owned:
            await client.aclose()


__all__ = ["ClientHandle", "build_async_client"]
