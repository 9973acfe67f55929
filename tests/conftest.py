# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

import json

import pytest

from Libs                  import parse_server_message
from Public.WebSocket.Libs import RoomRegistry, PeerHub, ConnectionCoordinator


class FakeHandle:
    def __init__(self, when, seq, callback, args):
        self.when      = when
        self.seq       = seq
        self.callback  = callback
        self.args      = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Elle ilerletilen saat; asyncio loop'un call_later yüzeyini taklit eder"""

    def __init__(self):
        self.now    = 0.0
        self._seq   = 0
        self._queue = []

    def call_later(self, delay, callback, *args):
        self._seq += 1
        handle = FakeHandle(self.now + delay, self._seq, callback, args)
        self._queue.append(handle)
        return handle

    def advance(self, seconds=0.0):
        target = self.now + seconds
        while True:
            due = [h for h in self._queue if not h.cancelled and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.seq))
            self._queue.remove(handle)
            self.now = max(self.now, handle.when)
            handle.callback(*handle.args)
        self._queue = [h for h in self._queue if not h.cancelled]
        self.now = target


class FakeSocket:
    """PeerHub'ın gönderdiği mesajları kaydeder"""

    def __init__(self):
        self.sent = []

    async def send_text(self, text):
        self.sent.append(json.loads(text))

    def types(self):
        return [m["type"] for m in self.sent]

    def of_type(self, kind):
        return [m for m in self.sent if m["type"] == kind]

    def clear(self):
        self.sent.clear()


class FakeTransport:
    """ClientSyncAgent için kayıt tutan transport"""

    def __init__(self, peer_id="me"):
        self.peer_id   = peer_id
        self.connected = False
        self.closed    = False
        self.sent      = []
        self._handlers = {}

    def on(self, event, callback):
        self._handlers.setdefault(event, []).append(callback)

    def emit(self, event, payload=None):
        if not self.connected:
            return False
        self.sent.append((event, payload or {}))
        return True

    async def close(self):
        self.closed    = True
        self.connected = False

    def _trigger(self, event, *args):
        for callback in self._handlers.get(event, []):
            callback(*args)

    def connect(self):
        self.connected = True
        self._trigger("connect")

    def disconnect(self):
        self.connected = False
        self._trigger("disconnect")

    def deliver(self, data):
        message = parse_server_message(data)
        self._trigger(message.type, message)

    def events(self):
        return [event for event, _ in self.sent]

    def payloads(self, event):
        return [payload for kind, payload in self.sent if kind == event]


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def relay(registry):
    """(registry, connect) - connect(peer_id) → (coordinator, socket)"""
    hub = PeerHub()

    def connect(peer_id):
        socket = FakeSocket()
        hub.register(peer_id, socket)
        return ConnectionCoordinator(peer_id, registry, hub), socket

    return registry, connect
