"""LlmClient: stream/non-stream modes and cooperative cancellation."""
from __future__ import annotations

import pytest

from llm_connector.base.cancellation import CancellationToken, CancelledError
from llm_connector.base.dto import parse_provider_config
from llm_connector.base.errors import BackendError
from llm_connector.base.models import ChatRequest, ChatResult, Message, StreamingResult
from llm_connector.base.streaming import FragmentStream
from llm_connector.client import LlmClient
from llm_connector.openai import OpenAIAdapter

from .utils import Recorder, mock_client, sse_lines


class ScriptedAdapter:
    """Adapter yielding fixed pieces; ``raise_after`` injects an exception."""

    provider_name = "scripted"
    model = "script-1"

    def __init__(self, pieces, *, raise_after=None, stop_reason="end_turn"):
        self.pieces = list(pieces)
        self.raise_after = raise_after
        self.stop_reason = stop_reason
        self.calls = 0
        self.pulled = 0
        self.source_closed = False
        self.closed = False

    def send_messages(self, messages, overrides=None):
        adapter = self

        async def _source(meta):
            adapter.calls += 1
            try:
                for i, piece in enumerate(adapter.pieces):
                    if adapter.raise_after is not None and i == adapter.raise_after[0]:
                        raise adapter.raise_after[1]
                    adapter.pulled += 1
                    yield piece
                meta.stop_reason = adapter.stop_reason
                meta.record_usage(3, len(adapter.pieces))
            finally:
                adapter.source_closed = True

        return FragmentStream(_source, provider=self.provider_name, model=self.model)

    async def list_models(self):
        return [self.model]

    async def aclose(self):
        self.closed = True


def _request(**kw):
    return ChatRequest(messages=[Message("user", "q")], **kw)


@pytest.mark.asyncio
async def test_non_stream_aggregates_text_and_meta():
    adapter = ScriptedAdapter(["Hel", "lo"])
    result = await LlmClient(adapter).chat(_request())
    assert isinstance(result, ChatResult)  # nosec B101 - pytest assert in tests
    assert result.text == "Hello" and result.stop_reason == "end_turn"  # nosec B101 - pytest assert in tests
    assert (result.usage_input, result.usage_output) == (3, 2)  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_unknown_stop_reason_when_backend_reports_none():
    result = await LlmClient(ScriptedAdapter(["x"], stop_reason=None)).chat(_request())
    assert result.stop_reason == "unknown"  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_stream_returns_before_any_request():
    adapter = ScriptedAdapter(["a", "b"])
    result = await LlmClient(adapter).chat(_request(stream=True))
    assert isinstance(result, StreamingResult) and adapter.calls == 0  # nosec B101 - pytest assert in tests
    assert [f.text async for f in result] == ["a", "b"]  # nosec B101 - pytest assert in tests
    assert result.meta.stop_reason == "end_turn"  # nosec B101 - pytest assert in tests
    assert [f async for f in result] == []  # nosec B101 - pytest assert in tests
    assert adapter.calls == 1  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_cancel_before_first_pull_issues_no_request():
    token = CancellationToken()
    token.cancel("user")
    adapter = ScriptedAdapter(["a"])
    result = await LlmClient(adapter).chat(_request(stream=True, cancel_token=token))
    assert [f async for f in result] == []  # nosec B101 - pytest assert in tests
    assert adapter.calls == 0  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_cancel_mid_stream_stops_and_releases_source():
    token = CancellationToken()
    adapter = ScriptedAdapter(["one", "two", "three", "four"])
    result = await LlmClient(adapter).chat(_request(stream=True, cancel_token=token))
    seen = []
    async for fragment in result:
        seen.append(fragment.text)
        if len(seen) == 2:
            token.cancel()
    assert seen == ["one", "two"]  # nosec B101 - pytest assert in tests
    assert adapter.pulled <= 3 and adapter.source_closed is True  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_cancelled_non_stream_keeps_partial_text():
    token = CancellationToken()

    def _observe(fragment):
        if fragment.text == "b":
            token.cancel()

    adapter = ScriptedAdapter(["a", "b", "c"])
    result = await LlmClient(adapter).chat(_request(cancel_token=token, on_fragment=_observe))
    assert result.stop_reason == "cancelled"  # nosec B101 - pytest assert in tests
    assert result.text == "ab"  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_cancelled_error_from_source_ends_cleanly():
    adapter = ScriptedAdapter(["a", "b"], raise_after=(1, CancelledError("stop")))
    result = await LlmClient(adapter).chat(_request(stream=True))
    assert [f.text async for f in result] == ["a"]  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_on_fragment_sync_and_async_observers():
    seen = []

    async def _async_observer(fragment):
        seen.append(("async", fragment.text))

    client = LlmClient(ScriptedAdapter(["x", "y"]))
    await client.chat(_request(on_fragment=lambda f: seen.append(("sync", f.text))))
    await client.chat(_request(on_fragment=_async_observer))
    assert seen == [("sync", "x"), ("sync", "y"), ("async", "x"), ("async", "y")]  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_backend_errors_propagate_unchanged():
    err = BackendError(503, "busy", provider="scripted")
    adapter = ScriptedAdapter(["a", "b"], raise_after=(1, err))
    with pytest.raises(BackendError) as info:
        await LlmClient(adapter).chat(_request())
    assert info.value is err and adapter.source_closed is True  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_early_aclose_ends_http_stream():
    body = sse_lines(
        {"choices": [{"delta": {"content": "first"}}]},
        {"choices": [{"delta": {"content": "second"}}]},
    )
    recorder = Recorder(chunks=[body[:60], body[60:]])
    cfg = parse_provider_config({"kind": "openai", "model": "m", "api_key": "sk-test"})
    http = mock_client(recorder)
    client = LlmClient(OpenAIAdapter(cfg, http_client=http))
    result = await client.chat(_request(stream=True))
    first = await result.fragments.__anext__()
    await result.aclose()
    assert first.text == "first"  # nosec B101 - pytest assert in tests
    assert [f async for f in result] == [] and len(recorder.requests) == 1  # nosec B101 - pytest assert in tests
    await http.aclose()


@pytest.mark.asyncio
async def test_chat_text_and_aclose():
    adapter = ScriptedAdapter(["ok"])
    client = LlmClient(adapter)
    assert await client.chat_text([{"role": "user", "content": "q"}]) == "ok"  # nosec B101 - pytest assert in tests
    assert (client.provider_name, client.model) == ("scripted", "script-1")  # nosec B101 - pytest assert in tests
    await client.aclose()
    assert adapter.closed is True  # nosec B101 - pytest assert in tests
