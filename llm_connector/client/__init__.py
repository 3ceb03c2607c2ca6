"""Unified client layer: ``LlmClient`` and the application-owned ``ClientRegistry``."""

from .llm_client import LlmClient
from .registry import ClientRegistry

__all__ = ["LlmClient", "ClientRegistry"]
