"""Connection lifecycle (``ConnectionManager`` state machine)."""

from .manager import CANCELLED_MESSAGE, ConnectionManager, ConnectionState, ConnectionStatus, StateListener

__all__ = ["CANCELLED_MESSAGE", "ConnectionManager", "ConnectionState", "ConnectionStatus", "StateListener"]
