"""SupportsModelListing Protocol (single-class module)."""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class SupportsModelListing(Protocol):
    """Adapters that can enumerate the backend's models."""

    async def list_models(self) -> List[str]:
        """Return model identifiers known to the backend (may be empty)."""
        ...
