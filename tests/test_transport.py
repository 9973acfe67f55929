# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

import json

import pytest
import websockets

from Client.Libs import Transport
from Libs        import PlaybackCommand


class FakeConnection:
    """Verilen kareleri sırayla döndürüp kapanan bağlantı"""

    def __init__(self, frames):
        self.frames = list(frames)
        self.sent   = []
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self.frames:
            raise StopAsyncIteration
        return self.frames.pop(0)

    async def send(self, text):
        self.sent.append(json.loads(text))

    async def close(self):
        self.closed = True


@pytest.fixture
def events():
    return []


def record(transport, events, *names):
    for name in names:
        transport.on(name, lambda *args, name=name: events.append((name, args)))


async def test_gives_up_after_attempt_budget(monkeypatch, events):
    calls = []

    async def failing_connect(url):
        calls.append(url)
        raise OSError("bağlantı reddedildi")

    monkeypatch.setattr(websockets, "connect", failing_connect)

    transport = Transport("ws://test/sync", attempts=5, delay=0)
    record(transport, events, "connect_error")
    await transport.run()

    assert len(calls) == 6
    assert len(events) == 6
    assert transport.gave_up is True
    assert transport.connected is False


async def test_successful_session_resets_budget(monkeypatch, events):
    connections = [FakeConnection([
        json.dumps({"type": "connected", "userId": "abc12345"}),
        json.dumps({"type": "play", "currentTime": 3.0, "initiatedBy": "x"}),
    ])]
    calls = []

    async def connect(url):
        calls.append(url)
        if connections:
            return connections.pop(0)
        raise OSError("yok")

    monkeypatch.setattr(websockets, "connect", connect)

    transport = Transport("ws://test/sync", attempts=5, delay=0)
    record(transport, events, "connect", "play", "disconnect")
    await transport.run()

    names = [name for name, _ in events]
    assert names == ["connect", "play", "disconnect"]
    assert isinstance(events[1][1][0], PlaybackCommand)

    # 1 başarılı + kopuştan sonra 5 deneme
    assert len(calls) == 6
    assert transport.gave_up is True
    assert transport.peer_id is None


def test_dispatch_skips_invalid_frames(events):
    transport = Transport("ws://test/sync")
    record(transport, events, "connect", "play")

    transport._dispatch("bozuk")
    transport._dispatch(json.dumps({"type": "play", "currentTime": -1}))
    transport._dispatch(json.dumps({"type": "bilinmeyen"}))
    assert events == []

    transport._dispatch(json.dumps({"type": "connected", "userId": "p1"}))
    assert transport.connected is True
    assert transport.peer_id == "p1"
    assert events == [("connect", ())]


def test_handler_errors_are_contained(events):
    transport = Transport("ws://test/sync")

    def broken(message):
        raise RuntimeError("bozuk işleyici")

    transport.on("seek", broken)
    record(transport, events, "seek")

    transport._dispatch(json.dumps({"type": "seek", "currentTime": 1.0}))
    assert [name for name, _ in events] == ["seek"]


def test_off_removes_handlers(events):
    transport = Transport("ws://test/sync")
    record(transport, events, "connect")
    transport.off("connect")

    transport._dispatch(json.dumps({"type": "connected", "userId": "p1"}))
    assert events == []


def test_emit_requires_connection():
    transport = Transport("ws://test/sync")
    assert transport.emit("sync_request") is False


async def test_emit_sends_typed_frame():
    transport = Transport("ws://test/sync")
    connection = FakeConnection([])
    transport._ws = connection
    transport._dispatch(json.dumps({"type": "connected", "userId": "p1"}))

    assert transport.emit("seek", {"currentTime": 8.0, "timestamp": 1}) is True
    for task in list(transport._tasks):
        await task

    assert connection.sent == [{"type": "seek", "currentTime": 8.0, "timestamp": 1}]


async def test_close_stops_reconnecting(monkeypatch):
    transport = Transport("ws://test/sync", attempts=5, delay=0)

    async def connect(url):
        await transport.close()
        raise OSError("kapandı")

    monkeypatch.setattr(websockets, "connect", connect)
    await transport.run()

    assert transport.gave_up is False
