"""
OpenAI-compatible provider package.

Exports:
- OpenAIAdapter: adapter for ``/v1/chat/completions`` style backends
"""

from .client import OpenAIAdapter

__all__ = ["OpenAIAdapter"]
