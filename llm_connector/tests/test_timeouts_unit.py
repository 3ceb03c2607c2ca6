"""Timeout configuration from the environment."""
from __future__ import annotations

from llm_connector.base.timeouts import get_timeout_config, reset_timeout_config


def test_defaults_leave_read_unbounded():
    cfg = get_timeout_config()
    timeout = cfg.to_httpx()
    assert timeout.read is None  # nosec B101 - pytest assert in tests
    assert timeout.connect == 10.0 and timeout.pool == 30.0  # nosec B101 - pytest assert in tests
    assert get_timeout_config() is cfg  # nosec B101 - pytest assert in tests


def test_env_values_and_invalid_fallbacks(monkeypatch):
    monkeypatch.setenv("LLM_CONNECTOR_CONNECT_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("LLM_CONNECTOR_READ_TIMEOUT_SECONDS", "60")
    monkeypatch.setenv("LLM_CONNECTOR_HTTP_TIMEOUT_SECONDS", "-1")
    reset_timeout_config()
    cfg = get_timeout_config()
    assert cfg.connect_timeout_seconds == 2.5 and cfg.read_timeout_seconds == 60.0  # nosec B101 - pytest assert in tests
    assert cfg.http_timeout_seconds == 30.0  # nosec B101 - pytest assert in tests
