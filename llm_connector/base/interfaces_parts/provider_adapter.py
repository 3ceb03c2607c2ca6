"""ProviderAdapter Protocol (single-class module).

Defines the contract every backend adapter satisfies. Adapters are selected
by configuration kind through ``ProviderFactory``; callers only see this
protocol.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence, runtime_checkable

from ..models import MessageLike
from ..streaming import FragmentStream


@runtime_checkable
class ProviderAdapter(Protocol):
    """Uniform send contract over heterogeneous backends."""

    @property
    def provider_name(self) -> str:
        """Provider kind, e.g. ``"openai"`` or ``"local"``."""
        ...

    @property
    def model(self) -> str:
        """Model identifier sent with every request."""
        ...

    def send_messages(
        self,
        messages: Sequence[MessageLike],
        overrides: Optional[Dict[str, Any]] = None,
    ) -> FragmentStream:
        """Return the lazy fragment sequence for ``messages``.

        No I/O happens until the first pull. Non-streaming replies produce a
        sequence of exactly one fragment. Backend failures surface as
        ``BackendError``/``ProtocolError`` raised from the pull.
        """
        ...

    async def aclose(self) -> None:
        """Release owned resources (HTTP client, local engine)."""
        ...
