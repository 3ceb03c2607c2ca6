"""HTTP helpers for adapters (client construction, checked requests, fragment streams)."""

from .client import ClientHandle, build_async_client
from .requests import request_json, stream_bytes
from .fragments import http_fragment_stream

__all__ = ["ClientHandle", "build_async_client", "request_json", "stream_bytes", "http_fragment_stream"]
