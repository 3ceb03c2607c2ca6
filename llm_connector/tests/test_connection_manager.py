"""ConnectionManager state machine."""
from __future__ import annotations

import asyncio

import httpx
import pytest

from llm_connector.base.errors import StateError
from llm_connector.connection import CANCELLED_MESSAGE, ConnectionManager, ConnectionState, ConnectionStatus

from .utils import Recorder, mock_client

OPENAI_CFG = {"kind": "openai", "model": "gpt-test", "api_key": "sk-test"}


def _manager(handler=None, **kw):
    handler = handler or Recorder(json_body={"data": [{"id": "gpt-a"}, {"id": "gpt-b"}]})
    return ConnectionManager(adapter_options={"http_client": mock_client(handler)}, **kw)


@pytest.mark.asyncio
async def test_connect_then_disconnect_walks_the_states():
    manager = _manager()
    seen = []
    manager.subscribe(lambda state: seen.append(state.status))

    state = await manager.connect(OPENAI_CFG)
    assert state.connected and manager.models == ["gpt-a", "gpt-b"]  # nosec B101 - pytest assert in tests
    assert manager.client.model == "gpt-test"  # nosec B101 - pytest assert in tests
    assert manager.config.model == "gpt-test"  # nosec B101 - pytest assert in tests

    await manager.disconnect()
    assert seen == [  # nosec B101 - pytest assert in tests
        ConnectionStatus.CONNECTING,
        ConnectionStatus.CONNECTED,
        ConnectionStatus.DISCONNECTED,
    ]
    assert manager.config is None and manager.models == []  # nosec B101 - pytest assert in tests
    with pytest.raises(StateError):
        manager.client


@pytest.mark.asyncio
async def test_invalid_config_ends_in_error_state():
    manager = _manager()
    state = await manager.connect({"kind": "openai", "model": "gpt-test"})
    assert state.status is ConnectionStatus.ERROR  # nosec B101 - pytest assert in tests
    assert "API key is required" in state.error  # nosec B101 - pytest assert in tests
    assert manager.config is None  # nosec B101 - pytest assert in tests

    retry = await manager.connect(OPENAI_CFG)
    assert retry.connected  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_connect_twice_is_a_state_error():
    manager = _manager()
    await manager.connect(OPENAI_CFG)
    with pytest.raises(StateError):
        await manager.connect(OPENAI_CFG)


@pytest.mark.asyncio
async def test_disconnect_without_connection_is_a_state_error():
    with pytest.raises(StateError):
        await ConnectionManager().disconnect()


@pytest.mark.asyncio
async def test_model_discovery_failure_still_connects(log_events):
    manager = _manager(Recorder(status=500, body=b"boom"))
    state = await manager.connect(OPENAI_CFG)
    assert state.connected and manager.models == []  # nosec B101 - pytest assert in tests
    assert any(e.get("event") == "models.discovery_failed" for e in log_events)  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_discovery_can_be_disabled_and_refreshed():
    recorder = Recorder(json_body={"data": [{"id": "late"}]})
    manager = _manager(recorder, discover_models=False)
    await manager.connect(OPENAI_CFG)
    assert manager.models == [] and recorder.requests == []  # nosec B101 - pytest assert in tests
    assert await manager.list_models(refresh=True) == ["late"]  # nosec B101 - pytest assert in tests
    assert await manager.list_models() == ["late"]  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_list_models_requires_connection():
    with pytest.raises(StateError):
        await ConnectionManager().list_models()


@pytest.mark.asyncio
async def test_async_listener_and_unsubscribe():
    manager = _manager()
    seen = []

    async def _listener(state: ConnectionState):
        seen.append(state.status.value)

    unsubscribe = manager.subscribe(_listener)
    await manager.connect(OPENAI_CFG)
    unsubscribe()
    await manager.disconnect()
    assert seen == ["connecting", "connected"]  # nosec B101 - pytest assert in tests


class _Engine:
    def create_chat_completion(self, body):
        return {"choices": [{"message": {"content": "ok"}}]}


@pytest.mark.asyncio
async def test_eager_local_engine_is_initialized_on_connect():
    built = []

    def factory(model, cfg):
        built.append(model)
        return _Engine()

    manager = ConnectionManager(adapter_options={"engine_factory": factory})
    state = await manager.connect({"kind": "local", "model": "tiny", "eager_init": True})
    assert state.connected and built == ["tiny"]  # nosec B101 - pytest assert in tests
    assert manager.models == []  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_engine_failure_moves_to_error():
    def factory(model, cfg):
        raise RuntimeError("weights missing")

    manager = ConnectionManager(adapter_options={"engine_factory": factory})
    state = await manager.connect({"kind": "local", "model": "tiny", "eager_init": True})
    assert state.status is ConnectionStatus.ERROR and state.error == "weights missing"  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_transport_failure_during_discovery_is_tolerated():
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    manager = _manager(_refuse)
    state = await manager.connect(OPENAI_CFG)
    assert state.connected and manager.models == []  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_cancelled_engine_init_ends_in_error_and_allows_retry():
    calls = []

    async def factory(model, cfg):
        calls.append(model)
        if len(calls) == 1:
            await asyncio.sleep(10)
        return _Engine()

    manager = ConnectionManager(adapter_options={"engine_factory": factory})
    cfg = {"kind": "local", "model": "tiny", "eager_init": True}
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(manager.connect(cfg), 0.05)
    assert manager.status is ConnectionStatus.ERROR  # nosec B101 - pytest assert in tests
    assert manager.state.error == CANCELLED_MESSAGE and manager.config is None  # nosec B101 - pytest assert in tests
    with pytest.raises(StateError):
        await manager.disconnect()

    state = await manager.connect(cfg)
    assert state.connected and calls == ["tiny", "tiny"]  # nosec B101 - pytest assert in tests


@pytest.mark.asyncio
async def test_cancelled_model_discovery_ends_in_error():
    async def _stall(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(10)
        return httpx.Response(200, json={"data": []})

    manager = _manager(_stall)
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(manager.connect(OPENAI_CFG), 0.05)
    assert manager.status is ConnectionStatus.ERROR  # nosec B101 - pytest assert in tests
    assert manager.models == [] and manager.config is None  # nosec B101 - pytest assert in tests
    with pytest.raises(StateError):
        manager.client
