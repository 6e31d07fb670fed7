"""
tests/test_transports.py
─────────────────────────
Tests for the HTTP poller and the WebSocket push channel.
"""
import json
from types import SimpleNamespace

import aiohttp
import httpx
import pytest

from src.sync.errors import ConnectionFailure, DataFailure
from src.sync.transports import PushChannel, ReadingPoller

API_URL = "http://sensors.test/api/readings"
PUSH_URL = "ws://sensors.test/live"


def _poller(handler) -> ReadingPoller:
    return ReadingPoller(API_URL, timeout=1.0, transport=httpx.MockTransport(handler))


class TestReadingPoller:
    @pytest.mark.asyncio
    async def test_returns_array(self, make_payload):
        body = [make_payload(0), make_payload(1)]
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            return httpx.Response(200, json=body)

        poller = _poller(handler)
        try:
            assert await poller.fetch() == body
        finally:
            await poller.close()
        assert seen["headers"]["cache-control"] == "no-cache"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        poller = _poller(lambda request: httpx.Response(503))
        with pytest.raises(ConnectionFailure) as exc:
            await poller.fetch()
        await poller.close()
        assert "503" in exc.value.message
        assert exc.value.url == API_URL

    @pytest.mark.asyncio
    async def test_timeout_is_connection_failure(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        poller = _poller(handler)
        with pytest.raises(ConnectionFailure):
            await poller.fetch(timeout=0.1)
        await poller.close()

    @pytest.mark.asyncio
    async def test_transport_error_is_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        poller = _poller(handler)
        with pytest.raises(ConnectionFailure):
            await poller.fetch()
        await poller.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>"),
            httpx.Response(200, json={"temperatura": 20}),
            httpx.Response(200, json=[]),
        ],
        ids=["not-json", "not-array", "empty"],
    )
    async def test_bad_body_is_data_failure(self, response):
        poller = _poller(lambda request: response)
        with pytest.raises(DataFailure):
            await poller.fetch()
        await poller.close()

    @pytest.mark.asyncio
    async def test_client_reused(self, make_payload):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=[make_payload(0)])

        poller = _poller(handler)
        await poller.fetch()
        client = poller._client
        await poller.fetch()
        assert poller._client is client
        await poller.close()
        assert len(calls) == 2


# ── Push channel fakes ────────────────────────────────────────────────────────


class FakeWebSocket:
    def __init__(self, frames):
        self._frames = list(frames)
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._frames:
            raise StopAsyncIteration
        return self._frames.pop(0)

    def exception(self):
        return None

    async def close(self):
        self.closed = True


class FakeSession:
    """Each ws_connect consumes the next script entry: an exception or a FakeWebSocket."""

    def __init__(self, script):
        self.script = list(script)
        self.connects = 0
        self.closed = False

    async def ws_connect(self, url, **kwargs):
        self.connects += 1
        step = self.script.pop(0) if self.script else aiohttp.ClientConnectionError("refused")
        if isinstance(step, Exception):
            raise step
        return step

    async def close(self):
        self.closed = True


class RecordingHandler:
    def __init__(self):
        self.connected = 0
        self.messages = []
        self.disconnects = []

    async def on_push_connected(self):
        self.connected += 1

    async def on_push_message(self, payload):
        self.messages.append(payload)

    async def on_push_disconnected(self, reason):
        self.disconnects.append(reason)


def _text(data) -> SimpleNamespace:
    raw = data if isinstance(data, str) else json.dumps(data)
    return SimpleNamespace(type=aiohttp.WSMsgType.TEXT, data=raw)


def _channel(session, attempts=5) -> PushChannel:
    return PushChannel(
        PUSH_URL,
        reconnect_attempts=attempts,
        reconnect_delay=0,
        handshake_timeout=1.0,
        session_factory=lambda: session,
    )


class TestPushChannel:
    @pytest.mark.asyncio
    async def test_gives_up_after_reconnect_attempts(self):
        session = FakeSession([])
        handler = RecordingHandler()
        await _channel(session, attempts=5).run(handler)
        assert session.connects == 6
        assert len(handler.disconnects) == 6
        assert handler.connected == 0
        assert session.closed

    @pytest.mark.asyncio
    async def test_forwards_only_new_data_events(self, make_payload):
        reading = make_payload(0)
        ws = FakeWebSocket(
            [
                _text({"event": "new_data", "data": reading}),
                _text({"event": "heartbeat"}),
                _text("not json"),
                _text([1, 2, 3]),
            ]
        )
        session = FakeSession([ws])
        handler = RecordingHandler()
        await _channel(session, attempts=0).run(handler)

        assert handler.connected == 1
        assert handler.messages == [reading]
        assert handler.disconnects == ["closed by server"]
        assert ws.closed

    @pytest.mark.asyncio
    async def test_counter_resets_after_successful_handshake(self):
        refused = aiohttp.ClientConnectionError("refused")
        session = FakeSession([refused, FakeWebSocket([]), refused, refused])
        handler = RecordingHandler()
        await _channel(session, attempts=1).run(handler)
        assert session.connects == 3
        assert handler.connected == 1

    @pytest.mark.asyncio
    async def test_error_frame_ends_session(self):
        ws = FakeWebSocket([SimpleNamespace(type=aiohttp.WSMsgType.ERROR, data=None)])
        handler = RecordingHandler()
        await _channel(FakeSession([ws]), attempts=0).run(handler)
        assert handler.disconnects[0].startswith("WebSocket error")
