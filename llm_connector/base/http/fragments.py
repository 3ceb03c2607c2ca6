"""Compose a checked HTTP exchange with a stream decoder.

Networked adapters differ only in how they build the request and how they
read a frame or a single reply. :func:`http_fragment_stream` wires those
pieces into a lazy :class:`FragmentStream`:

- streaming: POST, then decode the body with the adapter's SSE dialect
- single-shot: POST, parse JSON, extract exactly one fragment

Nothing is sent before the first pull. Closing the stream early closes the
HTTP response.
"""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Callable, Mapping, Optional, Union

import httpx

from ..logging import LogContext, normalized_log_event
from ..models import ResponseMeta
from ..streaming import FragmentStream, SimpleSSEDecoder, Translator, TypedSSEDecoder, WarningSink, pump_fragments
from .requests import request_json, stream_bytes

DecoderFactory = Callable[[], Union[SimpleSSEDecoder, TypedSSEDecoder]]
SingleExtractor = Callable[[Any, ResponseMeta], str]


def http_fragment_stream(
    client: Callable[[], httpx.AsyncClient],
    *,
    url: str,
    headers: Mapping[str, str],
    body: Mapping[str, Any],
    stream: bool,
    decoder_factory: DecoderFactory,
    translate: Translator,
    extract: SingleExtractor,
    ctx: LogContext,
    logger: logging.Logger,
    on_warning: Optional[WarningSink] = None,
) -> FragmentStream:
    """Return a lazy fragment stream for one POST to ``url``.

    ``client`` is a zero-argument callable so that the adapter can create its
    HTTP client on first use.
    """
    provider = ctx.provider or "unknown"

    async def _source(meta: ResponseMeta) -> AsyncIterator[str]:
        emitted = 0
        if stream:
            chunks = stream_bytes(
                client(), "POST", url, headers=headers, body=body, ctx=ctx, logger=logger, meta=meta
            )
            fragments = pump_fragments(
                chunks,
                decoder_factory(),
                translate,
                meta,
                provider=provider,
                model=ctx.model,
                on_warning=on_warning,
            )
            async with aclosing(fragments) as texts:
                async for text in texts:
                    emitted += 1
                    yield text
        else:
            payload = await request_json(
                client(), "POST", url, headers=headers, body=body, ctx=ctx, logger=logger, meta=meta
            )
            meta.raw = payload
            text = extract(payload, meta)
            emitted = 1
            yield text
        normalized_log_event(
            logger,
            "stream.end",
            ctx,
            phase="finalize",
            emitted=emitted,
            tokens=meta.tokens(),
            stop_reason=meta.stop_reason,
            stream=stream,
        )

    return FragmentStream(_source, provider=provider, model=ctx.model)


__all__ = ["DecoderFactory", "SingleExtractor", "http_fragment_stream"]
