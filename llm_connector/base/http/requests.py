"""Checked request helpers shared by the networked adapters.

Both helpers translate failures into the connector taxonomy:

- non-2xx status -> ``BackendError(status, body_text)``
- httpx transport failure -> ``BackendError(0, detail)`` with the classified
  code (``timeout`` or ``transient``)
- unparsable JSON body -> ``ProtocolError``

Every request logs a ``request.start`` event with the redacted URL; failures
log ``request.error``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Mapping, Optional

import httpx

from ..errors import BackendError, ProtocolError, classify_exception
from ..log_support import redact_url
from ..logging import LogContext, normalized_log_event
from ..models import ResponseMeta


def _transport_error(exc: httpx.HTTPError, ctx: LogContext) -> BackendError:
    return BackendError(
        0,
        f"{type(exc).__name__}: {exc}",
        provider=ctx.provider or "unknown",
        model=ctx.model,
        code=classify_exception(exc),
        raw=exc,
    )


def _log_failure(logger: logging.Logger, ctx: LogContext, err: BackendError) -> None:
    normalized_log_event(
        logger,
        "request.error",
        ctx,
        phase="response",
        error_code=err.code.value,
        status_code=err.status_code,
        detail=err.body[:500],
    )


async def stream_bytes(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: Mapping[str, str],
    body: Any,
    ctx: LogContext,
    logger: logging.Logger,
    meta: Optional[ResponseMeta] = None,
) -> AsyncIterator[bytes]:
    """Issue a streaming request and yield raw body chunks.

    The response is closed when the generator finishes or is closed early.
    """
    normalized_log_event(logger, "request.start", ctx, phase="request", url=redact_url(url), stream=True)
    try:
        async with client.stream(method, url, headers=dict(headers), json=body) as response:
            if meta is not None:
                meta.status_code = response.status_code
            if not response.is_success:
                text = (await response.aread()).decode("utf-8", errors="replace")
                err = BackendError(
                    response.status_code, text, provider=ctx.provider or "unknown", model=ctx.model
                )
                _log_failure(logger, ctx, err)
                raise err
            async for chunk in response.aiter_bytes():
                yield chunk
    except httpx.HTTPError as exc:
        err = _transport_error(exc, ctx)
        _log_failure(logger, ctx, err)
        raise err from exc


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: Mapping[str, str],
    ctx: LogContext,
    logger: logging.Logger,
    body: Any = None,
    meta: Optional[ResponseMeta] = None,
) -> Any:
    """Issue a request and return the decoded JSON body."""
    normalized_log_event(logger, "request.start", ctx, phase="request", url=redact_url(url), stream=False)
    try:
        response = await client.request(method, url, headers=dict(headers), json=body)
    except httpx.HTTPError as exc:
        err = _transport_error(exc, ctx)
        _log_failure(logger, ctx, err)
        raise err from exc
    if meta is not None:
        meta.status_code = response.status_code
    if not response.is_success:
        err = BackendError(response.status_code, response.text, provider=ctx.provider or "unknown", model=ctx.model)
        _log_failure(logger, ctx, err)
        raise err
    try:
        return json.loads(response.content)
    except ValueError as exc:
        raise ProtocolError(
            f"invalid JSON in response: {exc}", provider=ctx.provider or "unknown", model=ctx.model
        ) from exc


__all__ = ["stream_bytes", "request_json"]
