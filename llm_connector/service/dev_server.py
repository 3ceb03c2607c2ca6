from __future__ import annotations

import os

import uvicorn

from ..config.defaults import RELAY_DEFAULT_HOST, RELAY_DEFAULT_PORT

HOST_ENV = "LLM_CONNECTOR_HOST"
PORT_ENV = "LLM_CONNECTOR_PORT"
RELOAD_ENV = "LLM_CONNECTOR_RELOAD"


def _parse_port(value: str | None, default: int) -> int:
    """Best-effort parse of a port from string, falling back to a sane default."""
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def main() -> None:
    """Start the relay service with uvicorn.

    - LLM_CONNECTOR_HOST: interface to bind (default "127.0.0.1")
    - LLM_CONNECTOR_PORT: port to bind (default 3003)
    - LLM_CONNECTOR_RELOAD: "true" enables auto-reload (default off)
    """
    host = os.getenv(HOST_ENV, RELAY_DEFAULT_HOST)
    port = _parse_port(os.getenv(PORT_ENV), RELAY_DEFAULT_PORT)
    reload_enabled = (os.getenv(RELOAD_ENV) or "").lower() == "true"

    uvicorn.run(
        "llm_connector.service.app:app",
        host=host,
        port=port,
        reload=reload_enabled,
    )


if __name__ == "__main__":
    main()
