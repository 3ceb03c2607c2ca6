"""Gemini provider package.

Exports:
- GeminiAdapter: adapter for ``generateContent`` / ``streamGenerateContent``
"""

from .client import GeminiAdapter

__all__ = ["GeminiAdapter"]
