"""Pytest configuration for the connector test suite.

Every test starts from a clean environment: provider variables are removed
and the config-file and timeout caches are reset, so a developer's real keys
never leak into a test (and no test ever reaches the network).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

import pytest

from llm_connector.base.logging import get_logger
from llm_connector.base.timeouts import reset_timeout_config
from llm_connector.config import DEFAULTS, ENV_FIELD_MAP, reset_config_cache
from llm_connector.config.env import ENV_ALIASES, ENV_MAP

_EXTRA_VARS = (
    "LLM_CONNECTOR_CONFIG_FILE",
    "LLM_CONNECTOR_CORS_ORIGINS",
    "LLM_CONNECTOR_CONNECT_TIMEOUT_SECONDS",
    "LLM_CONNECTOR_READ_TIMEOUT_SECONDS",
    "LLM_CONNECTOR_HTTP_TIMEOUT_SECONDS",
)


def _provider_vars() -> Iterator[str]:
    for name in DEFAULTS:
        for suffix in ENV_FIELD_MAP.values():
            yield f"{name.upper()}_{suffix}"
    yield from ENV_MAP.values()
    for aliases in ENV_ALIASES.values():
        yield from aliases


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove provider variables and reset module caches around each test."""
    for var in (*_provider_vars(), *_EXTRA_VARS):
        monkeypatch.delenv(var, raising=False)
    reset_config_cache()
    reset_timeout_config()
    yield
    reset_config_cache()
    reset_timeout_config()


class _EventHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            payload = {"msg": record.getMessage()}
        payload["_level"] = record.levelno
        self.events.append(payload)


@pytest.fixture()
def log_events() -> Iterator[List[Dict[str, Any]]]:
    """Collect structured connector events (decoded JSON payloads)."""
    logger = get_logger()
    handler = _EventHandler()
    logger.addHandler(handler)
    try:
        yield handler.events
    finally:
        logger.removeHandler(handler)
