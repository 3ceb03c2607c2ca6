"""LLM connector debugging CLI (package entrypoint).

Wires argument parsing to the action handlers in ``cli_actions``; performs
no provider logic directly.
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import handle_chat, handle_models
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    p = build_parser()
    args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.cmd == "models":
        return handle_models(args)
    return handle_chat(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
