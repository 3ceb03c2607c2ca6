"""ConnectionManager: lifecycle of the active backend connection.

States and transitions
----------------------
``disconnected -> connecting``, ``error -> connecting``,
``connecting -> connected``, ``connecting -> error``,
``connected -> disconnected``. Calling :meth:`ConnectionManager.connect`
while ``connecting`` or ``connected`` raises ``StateError``.

Connect sequence
----------------
1. Validate the configuration (``parse_provider_config``).
2. Build the adapter through the factory and wrap it in an ``LlmClient``.
3. Initialize local engines configured with ``eager_init``.
4. Best-effort model discovery; a failure is logged and yields ``[]``.

Any failure in steps 1-3 moves the manager to ``error`` with the message; the
failure is not raised. Cancelling ``connect`` (e.g. ``asyncio.wait_for``) at any
step closes the adapter, moves to ``error`` and re-raises ``CancelledError``.
No automatic reconnection is attempted.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

from ..base.dto import BaseProviderConfig, LocalConfig, parse_provider_config
from ..base.errors import ProviderError, StateError, classify_exception
from ..base.factory import ProviderFactory
from ..base.interfaces import ProviderAdapter, SupportsModelListing
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..client import LlmClient


class ConnectionStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


CANCELLED_MESSAGE = "connection attempt cancelled"

_ALLOWED = {
    (ConnectionStatus.DISCONNECTED, ConnectionStatus.CONNECTING),
    (ConnectionStatus.ERROR, ConnectionStatus.CONNECTING),
    (ConnectionStatus.CONNECTING, ConnectionStatus.CONNECTED),
    (ConnectionStatus.CONNECTING, ConnectionStatus.ERROR),
    (ConnectionStatus.CONNECTED, ConnectionStatus.DISCONNECTED),
}


@dataclass(frozen=True)
class ConnectionState:
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    error: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self.status is ConnectionStatus.CONNECTED


StateListener = Callable[[ConnectionState], Any]


class ConnectionManager:
    """Hold at most one live adapter/client pair and its configuration."""

    def __init__(
        self,
        factory: Type[ProviderFactory] = ProviderFactory,
        *,
        discover_models: bool = True,
        adapter_options: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._factory = factory
        self._discover = discover_models
        self._adapter_options = dict(adapter_options or {})
        self._state = ConnectionState()
        self._config: Optional[BaseProviderConfig] = None
        self._adapter: Optional[ProviderAdapter] = None
        self._client: Optional[LlmClient] = None
        self._models: List[str] = []
        self._listeners: List[StateListener] = []
        self._logger = get_logger("connection")

    # ---- read-only views ----
    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        return self._state.status

    @property
    def config(self) -> Optional[BaseProviderConfig]:
        return self._config

    @property
    def models(self) -> List[str]:
        return list(self._models)

    @property
    def client(self) -> LlmClient:
        if self._client is None or self._state.status is not ConnectionStatus.CONNECTED:
            raise StateError(f"No active connection (state: {self._state.status.value})")
        return self._client

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener(state)``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def _transition(self, status: ConnectionStatus, error: Optional[str] = None) -> None:
        current = self._state.status
        if (current, status) not in _ALLOWED:
            raise StateError(f"Cannot move from {current.value} to {status.value}")
        self._state = ConnectionState(status=status, error=error)
        cfg = self._config
        normalized_log_event(
            self._logger,
            "connection.state",
            LogContext(provider=cfg.kind if cfg else None, model=cfg.model if cfg else None),
            phase="lifecycle",
            status=status.value,
            previous=current.value,
            error=error,
        )
        for listener in list(self._listeners):
            result = listener(self._state)
            if inspect.isawaitable(result):
                await result

    async def connect(self, config: Union[BaseProviderConfig, Mapping[str, Any]]) -> ConnectionState:
        """Open a connection for ``config``; failures end in the ``error`` state."""
        if self._state.status in (ConnectionStatus.CONNECTING, ConnectionStatus.CONNECTED):
            raise StateError(f"Cannot connect while {self._state.status.value}")
        adapter: Optional[ProviderAdapter] = None
        try:
            await self._transition(ConnectionStatus.CONNECTING)
            validated = parse_provider_config(config)
            self._config = validated
            adapter = self._factory.create(validated, **self._adapter_options)
            if isinstance(validated, LocalConfig) and validated.eager_init:
                await adapter.initialize()  # type: ignore[attr-defined]
            self._adapter = adapter
            self._client = LlmClient(adapter)
            self._models = await self._discover_models() if self._discover else []
        except asyncio.CancelledError:
            await self._fail(adapter, CANCELLED_MESSAGE)
            raise
        except ProviderError as exc:
            await self._fail(adapter, exc.message)
            return self._state
        except Exception as exc:  # noqa: BLE001 - every failure ends in the error state
            await self._fail(adapter, str(exc) or type(exc).__name__)
            return self._state

        await self._transition(ConnectionStatus.CONNECTED)
        return self._state

    async def _fail(self, adapter: Optional[ProviderAdapter], message: str) -> None:
        self._adapter = None
        self._client = None
        self._models = []
        self._config = None
        try:
            if adapter is not None:
                await adapter.aclose()
        finally:
            if self._state.status is ConnectionStatus.CONNECTING:
                await self._transition(ConnectionStatus.ERROR, message)

    async def _discover_models(self) -> List[str]:
        adapter = self._adapter
        if not isinstance(adapter, SupportsModelListing):
            return []
        try:
            return list(await adapter.list_models())
        except Exception as exc:  # noqa: BLE001 - discovery is best-effort
            normalized_log_event(
                self._logger,
                "models.discovery_failed",
                LogContext(provider=adapter.provider_name, model=adapter.model),
                phase="discovery",
                error_code=classify_exception(exc).value,
                detail=str(exc),
            )
            return []

    async def disconnect(self) -> ConnectionState:
        """Close the adapter and forget the configuration (and its secret)."""
        if self._state.status is not ConnectionStatus.CONNECTED:
            raise StateError(f"Cannot disconnect while {self._state.status.value}")
        adapter = self._adapter
        self._adapter = None
        self._client = None
        self._models = []
        try:
            if adapter is not None:
                await adapter.aclose()
        finally:
            await self._transition(ConnectionStatus.DISCONNECTED)
            self._config = None
        return self._state

    async def list_models(self, refresh: bool = False) -> List[str]:
        """Return the cached model list, or query the adapter when ``refresh``."""
        if self._state.status is not ConnectionStatus.CONNECTED:
            raise StateError(f"No active connection (state: {self._state.status.value})")
        if refresh:
            self._models = await self._discover_models()
        return list(self._models)


__all__ = ["CANCELLED_MESSAGE", "ConnectionManager", "ConnectionState", "ConnectionStatus", "StateListener"]
