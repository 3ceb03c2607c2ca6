"""Gemini adapter over a mock transport."""
from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest

from llm_connector.base.dto import parse_provider_config
from llm_connector.base.errors import BackendError, ProtocolError
from llm_connector.base.models import ChatRequest, Message
from llm_connector.client import LlmClient
from llm_connector.gemini import GeminiAdapter

from .utils import Recorder, mock_client, split_every, sse_lines

BASE = "https://generativelanguage.googleapis.com/v1beta"


def _adapter(recorder, **cfg):
    data = {"kind": "gemini", "model": "gemini-test", "api_key": "g/key+1", **cfg}
    return GeminiAdapter(parse_provider_config(data), http_client=mock_client(recorder))


def _event(text=None, finish=None, usage=None):
    parts = [] if text is None else [{"text": text}]
    payload = {"candidates": [{"content": {"role": "model", "parts": parts}}]}
    if finish:
        payload["candidates"][0]["finishReason"] = finish
    if usage:
        payload["usageMetadata"] = usage
    return payload


@pytest.mark.asyncio
async def test_scenario_system_prepended_as_user_turn():
    rec = Recorder(json_body=_event("Sure."))
    adapter = _adapter(rec, system_message="S", response_format="single")
    result = await LlmClient(adapter).chat(ChatRequest(messages=[Message("user", "U")]))
    assert result.text == "Sure."  # nosec B101 - pytest assert in tests
    assert rec.last_json() == {  # nosec B101 - pytest assert in tests
        "contents": [
            {"role": "user", "parts": [{"text": "S"}]},
            {"role": "user", "parts": [{"text": "U"}]},
        ]
    }


@pytest.mark.asyncio
async def test_direct_stream_url_carries_escaped_key():
    rec = Recorder(chunks=[sse_lines(_event("a"), done=False)])
    await _adapter(rec).send_messages([Message("user", "x")]).collect_text()
    url = rec.last.url
    assert url.path == "/v1beta/models/gemini-test:streamGenerateContent"  # nosec B101 - pytest assert in tests
    query = parse_qs(urlsplit(str(url)).query)
    assert query == {"alt": ["sse"], "key": ["g/key+1"]}  # nosec B101 - pytest assert in tests
    assert "%2F" in str(url) and "%2B" in str(url)  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_direct_single_url_and_proxy_url():
    rec = Recorder(json_body=_event("x"))
    await _adapter(rec, response_format="single").send_messages([Message("user", "x")]).collect_text()
    assert str(rec.last.url).startswith(f"{BASE}/models/gemini-test:generateContent?key=")  # nosec B101 - pytest assert in tests

    rec_proxy = Recorder(json_body=_event("y"))
    proxy = _adapter(rec_proxy, mode="proxy", base_url="http://relay.local/gemini/", response_format="single")
    await proxy.send_messages([Message("user", "x")]).collect_text()
    assert str(rec_proxy.last.url) == "http://relay.local/gemini/gemini-test"  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
@pytest.mark.parametrize("size", [1, 5, 50])
async def test_stream_fragments_usage_and_finish(size):
    body = sse_lines(
        _event("Hel"),
        _event("lo"),
        _event(finish="STOP", usage={"promptTokenCount": 6, "candidatesTokenCount": 2}),
        done=False,
    )
    stream = _adapter(Recorder(chunks=split_every(body, size))).send_messages([Message("user", "x")])
    assert [f.text async for f in stream] == ["Hel", "lo"]  # nosec B101 - pytest assert in tests
    assert stream.meta.stop_reason == "STOP"  # nosec B101 - pytest assert in tests
    assert stream.meta.tokens() == {"input": 6, "output": 2}  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_roles_and_instruction_mode():
    rec = Recorder(json_body=_event("ok"))
    adapter = _adapter(rec, system_message="Base.", system_mode="instruction", response_format="single")
    await adapter.send_messages(
        [Message("system", "Inline."), Message("user", "q"), Message("assistant", "a"), Message("tool", "t")]
    ).collect_text()
    assert rec.last_json() == {  # nosec B101 - pytest assert in tests
        "contents": [
            {"role": "user", "parts": [{"text": "q"}]},
            {"role": "model", "parts": [{"text": "a"}]},
            {"role": "user", "parts": [{"text": "t"}]},
        ],
        "systemInstruction": {"parts": [{"text": "Base.\n\nInline."}]},
    }


@pytest.mark.asyncio
async def test_malformed_event_is_skipped(log_events):
    body = b"data: {oops\n\n" + sse_lines(_event("fine"), done=False)
    stream = _adapter(Recorder(chunks=[body])).send_messages([Message("user", "x")])
    assert await stream.collect_text() == "fine"  # nosec B101 - pytest assert in tests
    assert any(e.get("event") == "stream.decode_warning" for e in log_events)  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_key_is_redacted_from_logs(log_events):
    rec = Recorder(status=403, body=b"denied")
    with pytest.raises(BackendError):
        await _adapter(rec).send_messages([Message("user", "x")]).collect_text()
    dumped = repr(log_events)
    assert "g/key+1" not in dumped and "g%2Fkey%2B1" not in dumped  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_single_reply_without_candidates_is_protocol_error():
    rec = Recorder(json_body={"promptFeedback": {"blockReason": "SAFETY"}})
    with pytest.raises(ProtocolError):
        await _adapter(rec, response_format="single").send_messages([Message("user", "x")]).collect_text()


@pytest.mark.asyncio
async def test_list_models_strips_prefix():
    rec = Recorder(json_body={"models": [{"name": "models/gemini-1.5-pro"}, {"name": "models/gemini-1.5-flash"}]})
    assert await _adapter(rec).list_models() == ["gemini-1.5-pro", "gemini-1.5-flash"]  # nosec B101 - pytest assert in tests
    assert rec.last.url.path == "/v1beta/models"  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_wrong_shape_parts_event_is_skipped():
    body = sse_lines({"candidates": [{"content": {"parts": 5}}]}, _event("ok"), done=False)
    stream = _adapter(Recorder(chunks=[body])).send_messages([Message("user", "x")])
    assert await stream.collect_text() == "ok"  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
@pytest.mark.parametrize("pieces", [["Hello"], ["Hel", "lo, ", "wörld"]])
async def test_streamed_text_matches_single_reply(pieces):
    answer = "".join(pieces)
    streamed = _adapter(Recorder(chunks=[sse_lines(*(_event(p) for p in pieces), done=False)]))
    single = _adapter(Recorder(json_body=_event(answer, finish="STOP")), response_format="single")
    messages = [Message("user", "q")]
    streamed_text = await (await LlmClient(streamed).chat(ChatRequest(messages=messages, stream=True))).collect_text()
    assert streamed_text == (await LlmClient(single).chat(ChatRequest(messages=messages))).text == answer  # nosec B101 - pytest assert in tests
