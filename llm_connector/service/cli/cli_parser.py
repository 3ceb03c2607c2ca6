"""CLI parser construction for ``llm-connector``.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ...config.defaults import CLI_DEFAULT_PROVIDER


def _str2bool(v: str | None) -> bool:
    """Best-effort conversion of common truthy/falsey strings to bool.

    ``None`` (flag given without a value) means ``True``.
    """
    if v is None:
        return True
    val = v.strip().lower()
    if val in {"1", "t", "true", "y", "yes", "on"}:
        return True
    return False if val in {"0", "f", "false", "n", "no", "off"} else bool(val)


def add_stream_flags(parser: argparse.ArgumentParser) -> None:
    """Attach ``--stream``/``--no-stream`` flags to a parser.

    ``--stream`` accepts an optional boolean (``--stream``, ``--stream false``);
    ``--no-stream`` is an explicit negation alias.
    """
    grp = parser.add_mutually_exclusive_group()
    grp.add_argument("--stream", nargs="?", const=True, type=_str2bool, default=False)
    grp.add_argument("--no-stream", dest="stream", action="store_false")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``chat`` and ``models`` subcommands."""
    p = argparse.ArgumentParser(prog="llm-connector", description="LLM connector debugging CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_chat = sub.add_parser("chat", help="Send one prompt and print the answer")
    p_chat.add_argument("--provider", default=CLI_DEFAULT_PROVIDER)
    p_chat.add_argument("--model", default=None)
    p_chat.add_argument("--system", default=None, help="System message sent before the prompt")
    p_chat.add_argument("--base-url", dest="base_url", default=None)
    add_stream_flags(p_chat)
    p_chat.add_argument("--json", action="store_true", help="Print the result as JSON (non-streaming)")
    p_chat.add_argument("prompt", nargs="+")

    p_models = sub.add_parser("models", help="List the models a provider exposes")
    p_models.add_argument("--provider", default=CLI_DEFAULT_PROVIDER)
    p_models.add_argument("--base-url", dest="base_url", default=None)

    return p


__all__ = ["add_stream_flags", "build_parser"]
