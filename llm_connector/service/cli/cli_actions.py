"""CLI action handlers.

Purpose
-------
Execute the ``chat`` and ``models`` subcommands through the same layers an
application uses: layered config -> ``ProviderFactory`` -> ``LlmClient``.
This module has no top-level side effects and is safe to import in tests.

Error semantics
---------------
Errors are printed as one JSON object on stderr. Exit codes: ``0`` success,
``2`` configuration error (nothing was sent), ``1`` any other connector error.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, Optional, TextIO, Type

from ...base.errors import ConfigError, ProviderError
from ...base.factory import ProviderFactory
from ...base.interfaces import SupportsModelListing
from ...base.models import ChatRequest, ChatResult, Message, StreamFragment
from ...client import LlmClient
from ...config import load_provider_config

EXIT_OK = 0
EXIT_PROVIDER_ERROR = 1
EXIT_CONFIG_ERROR = 2


def _emit_error(err: ProviderError, stream: TextIO) -> None:
    payload: Dict[str, Any] = {
        "error": err.message,
        "code": err.code.value,
        "provider": err.provider,
    }
    if isinstance(err, ConfigError) and err.field:
        payload["field"] = err.field
    print(json.dumps(payload), file=stream)


def config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map CLI flags onto configuration fields (unset flags are dropped)."""
    stream = getattr(args, "stream", None)
    return {
        k: v
        for k, v in {
            "model": getattr(args, "model", None),
            "system_message": getattr(args, "system", None),
            "base_url": getattr(args, "base_url", None),
            "response_format": None if stream is None else ("stream" if stream else "single"),
        }.items()
        if v is not None
    }


async def _run_chat(
    client: LlmClient, prompt: str, stream: bool, out: TextIO
) -> ChatResult | None:
    messages = [Message(role="user", content=prompt)]
    if not stream:
        return await client.chat(ChatRequest(messages=messages))  # type: ignore[return-value]

    def _print(fragment: StreamFragment) -> None:
        out.write(fragment.text)
        out.flush()

    result = await client.chat(ChatRequest(messages=messages, stream=True, on_fragment=_print))
    async for _ in result:
        pass
    out.write("\n")
    return None


def handle_chat(
    args: argparse.Namespace,
    *,
    factory: Type[ProviderFactory] = ProviderFactory,
    adapter_options: Optional[Dict[str, Any]] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Send ``args.prompt`` and print the answer."""
    out = out or sys.stdout
    err = err or sys.stderr
    try:
        cfg = load_provider_config(args.provider, config_overrides(args))
        client = LlmClient(factory.create(cfg, **(adapter_options or {})))
    except ConfigError as exc:
        _emit_error(exc, err)
        return EXIT_CONFIG_ERROR

    async def _main() -> ChatResult | None:
        try:
            return await _run_chat(client, " ".join(args.prompt), bool(args.stream), out)
        finally:
            await client.aclose()

    try:
        result = asyncio.run(_main())
    except ProviderError as exc:
        _emit_error(exc, err)
        return EXIT_PROVIDER_ERROR

    if result is not None:
        if getattr(args, "json", False):
            print(json.dumps(result.to_dict(), ensure_ascii=False), file=out)
        else:
            print(result.text, file=out)
    return EXIT_OK


def handle_models(
    args: argparse.Namespace,
    *,
    factory: Type[ProviderFactory] = ProviderFactory,
    adapter_options: Optional[Dict[str, Any]] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Print one model id per line."""
    out = out or sys.stdout
    err = err or sys.stderr
    try:
        cfg = load_provider_config(args.provider, config_overrides(args))
        adapter = factory.create(cfg, **(adapter_options or {}))
    except ConfigError as exc:
        _emit_error(exc, err)
        return EXIT_CONFIG_ERROR

    async def _main() -> list[str]:
        try:
            if not isinstance(adapter, SupportsModelListing):
                return []
            return await adapter.list_models()
        finally:
            await adapter.aclose()

    try:
        models = asyncio.run(_main())
    except ProviderError as exc:
        _emit_error(exc, err)
        return EXIT_PROVIDER_ERROR
    for name in models:
        print(name, file=out)
    return EXIT_OK


__all__ = [
    "EXIT_CONFIG_ERROR",
    "EXIT_OK",
    "EXIT_PROVIDER_ERROR",
    "config_overrides",
    "handle_chat",
    "handle_models",
]
