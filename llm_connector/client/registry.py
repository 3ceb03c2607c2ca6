"""Explicit name -> client table owned by the application shell.

The connector core never reads this table; applications that juggle several
backends (for example one client per chat window) keep one instance and pass
it where it is needed.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .llm_client import LlmClient


class ClientRegistry:
    def __init__(self) -> None:
        self._clients: Dict[str, LlmClient] = {}

    def register(self, name: str, client: LlmClient) -> None:
        """Add or replace ``name``."""
        self._clients[name] = client

    def get(self, name: str) -> Optional[LlmClient]:
        return self._clients.get(name)

    def get_or_raise(self, name: str) -> LlmClient:
        try:
            return self._clients[name]
        except KeyError:
            available = ", ".join(sorted(self._clients)) or "none"
            raise KeyError(f"No client registered as '{name}' (available: {available})") from None

    def unregister(self, name: str) -> Optional[LlmClient]:
        return self._clients.pop(name, None)

    def names(self) -> List[str]:
        return sorted(self._clients)

    def __contains__(self, name: object) -> bool:
        return name in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def clear(self) -> None:
        """Forget every client without closing it."""
        self._clients.clear()

    async def aclose_all(self) -> None:
        """Close every client and empty the table."""
        clients, self._clients = list(self._clients.values()), {}
        for client in clients:
            await client.aclose()


__all__ = ["ClientRegistry"]
