"""LocalEngine Protocol (single-class module).

Shape expected from an in-process inference engine. The body passed to
``create_chat_completion`` mirrors the OpenAI-compatible request
(``messages``, ``stream`` plus completion options). The return value is
either a completion (``choices[0].message.content``) or an iterable / async
iterable of chunks (``choices[0].delta.content``); it may be awaitable.
Mappings and attribute objects are both accepted.
"""

from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class LocalEngine(Protocol):
    def create_chat_completion(self, body: Dict[str, Any]) -> Any:
        ...
