"""HTTP timeout configuration for adapters.

Streaming replies may pause for an arbitrarily long time between fragments,
so the connector applies no idle timeout of its own: the read timeout is
unset unless explicitly configured. Connection establishment, request upload
and pool acquisition are bounded.

Key Components
--------------
TimeoutConfig
    Frozen dataclass of timeout values (seconds) with a ``to_httpx`` helper.

get_timeout_config()
    Process-cached configuration parsed from environment variables (all
    optional):
        LLM_CONNECTOR_CONNECT_TIMEOUT_SECONDS
        LLM_CONNECTOR_READ_TIMEOUT_SECONDS   (unset = no read timeout)
        LLM_CONNECTOR_HTTP_TIMEOUT_SECONDS   (write + pool)

reset_timeout_config()
    Drop the cache (tests adjust the environment between cases).
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds.

    Attributes:
        connect_timeout_seconds: Bound on establishing the TCP/TLS connection.
        read_timeout_seconds: Bound on waiting for the next response bytes;
            ``None`` disables it so long-running streams are never cut.
        http_timeout_seconds: Bound on request upload and pool acquisition.
    """

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float | None = None
    http_timeout_seconds: float = 30.0

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout``."""
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.http_timeout_seconds,
            pool=self.http_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None


def _parse_env_float(name: str, default: float | None) -> float | None:
    """Read a positive float from ``name``; return ``default`` when unset or invalid."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED  # noqa: PLW0603 - module cache
    if _CACHED is not None:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=float(
            _parse_env_float("LLM_CONNECTOR_CONNECT_TIMEOUT_SECONDS", defaults.connect_timeout_seconds)
        ),
        read_timeout_seconds=_parse_env_float("LLM_CONNECTOR_READ_TIMEOUT_SECONDS", None),
        http_timeout_seconds=float(
            _parse_env_float("LLM_CONNECTOR_HTTP_TIMEOUT_SECONDS", defaults.http_timeout_seconds)
        ),
    )
    return _CACHED


def reset_timeout_config() -> None:
    """Forget the cached configuration so the next call re-reads the environment."""
    global _CACHED  # noqa: PLW0603 - module cache
    _CACHED = None


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "reset_timeout_config",
]
