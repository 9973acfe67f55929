# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

import importlib

import pytest

from fastapi.testclient import TestClient
from Core               import sync_FastAPI

sync_endpoint = importlib.import_module("Public.WebSocket.Routers.sync")


@pytest.fixture
def client():
    with TestClient(sync_FastAPI) as client:
        yield client


def join(ws, room_id, username, video_url=None):
    payload = {"type": "join_room", "roomId": room_id, "username": username}
    if video_url:
        payload["videoUrl"] = video_url
    ws.send_json(payload)


def test_hello_gives_peer_id(client):
    with client.websocket_connect("/sync") as ws:
        hello = ws.receive_json()

    assert hello["type"] == "connected"
    assert len(hello["userId"]) == 8


def test_two_peers_watch_together(client):
    with client.websocket_connect("/sync") as a, client.websocket_connect("/sync") as b:
        a_id = a.receive_json()["userId"]
        b_id = b.receive_json()["userId"]

        join(a, "r1", "A", "u")
        state = a.receive_json()
        assert state["type"]      == "room_state"
        assert state["userCount"] == 1
        assert state["isLoading"] is False

        join(b, "r1", "B")
        state = b.receive_json()
        assert state["type"]      == "room_state"
        assert state["videoUrl"]  == "u"
        assert state["userCount"] == 2
        assert state["isLoading"] is True

        loading = a.receive_json()
        assert loading == {"type": "user_loading", "userId": b_id, "username": "B", "loadingCount": 1}
        joined = a.receive_json()
        assert joined["type"]      == "user_joined"
        assert joined["userCount"] == 2

        b.send_json({"type": "user_ready"})
        assert b.receive_json()["type"] == "user_ready"
        assert a.receive_json()["loadingCount"] == 0

        a.send_json({"type": "play", "currentTime": 5.0, "timestamp": 1000})
        play = b.receive_json()
        assert play["type"]        == "play"
        assert play["currentTime"] == 5.0
        assert play["initiatedBy"] == a_id

        a.send_json({"type": "buffering_start"})
        assert a.receive_json()["type"] == "buffering_start"
        assert b.receive_json()["bufferingCount"] == 1

        a.send_json({"type": "buffering_end"})
        for ws in (a, b):
            assert ws.receive_json()["type"] == "buffering_end"
            assert ws.receive_json() == {"type": "resume_after_buffer", "currentTime": 5.0}


def test_invalid_frames_leave_state_untouched(client):
    with client.websocket_connect("/sync") as ws:
        ws.receive_json()
        join(ws, "r1", "A")
        ws.receive_json()

        ws.send_text("json değil")
        ws.send_text("[1, 2, 3]")
        ws.send_json({"type": "bilinmeyen"})
        ws.send_json({"type": "play"})
        ws.send_json({"type": "seek", "currentTime": -4})
        ws.send_json({"type": "seek", "currentTime": "NaN"})
        ws.send_text('{"type": "play", "currentTime": NaN}')
        ws.send_text("x" * 70000)

        ws.send_json({"type": "sync_request"})
        response = ws.receive_json()

    assert response["type"]        == "sync_response"
    assert response["currentTime"] == 0.0
    assert response["isPlaying"]   is False


def test_events_before_join_are_ignored(client):
    with client.websocket_connect("/sync") as ws:
        ws.receive_json()
        ws.send_json({"type": "play", "currentTime": 30.0})
        ws.send_json({"type": "sync_request"})

        join(ws, "r1", "A")
        state = ws.receive_json()

    assert state["type"]        == "room_state"
    assert state["currentTime"] == 0.0
    assert state["isPlaying"]   is False


def test_disconnect_notifies_room(client):
    with client.websocket_connect("/sync") as a:
        a.receive_json()
        join(a, "r1", "A")
        a.receive_json()

        with client.websocket_connect("/sync") as b:
            b_id = b.receive_json()["userId"]
            join(b, "r1", "B")
            b.receive_json()
            assert a.receive_json()["type"] == "user_loading"
            assert a.receive_json()["type"] == "user_joined"
            b.close()

        left = a.receive_json()
        assert left == {"type": "user_left", "userId": b_id, "username": "B", "userCount": 1, "loadingCount": 0}


def test_buffering_end_bypasses_high_frequency_limit(client, monkeypatch):
    monkeypatch.setattr(sync_endpoint, "WS_HIGH_FREQ_RATE", 1)

    with client.websocket_connect("/sync") as ws:
        ws.receive_json()
        join(ws, "r1", "A")
        ws.receive_json()

        ws.send_json({"type": "play", "currentTime": 5.0})
        ws.send_json({"type": "buffering_start"})
        assert ws.receive_json()["type"] == "buffering_start"

        # Kova dolu: seek düşer, buffering_end geçer
        ws.send_json({"type": "seek", "currentTime": 90.0})
        ws.send_json({"type": "buffering_end"})

        assert ws.receive_json()["type"] == "buffering_end"
        assert ws.receive_json() == {"type": "resume_after_buffer", "currentTime": 5.0}


def test_user_ready_bypasses_general_limit(client, monkeypatch):
    monkeypatch.setattr(sync_endpoint, "WS_GENERAL_RATE", 1)

    with client.websocket_connect("/sync") as a, client.websocket_connect("/sync") as b:
        a.receive_json()
        b_id = b.receive_json()["userId"]

        join(a, "r1", "A")
        a.receive_json()

        join(b, "r1", "B")
        b.receive_json()
        assert a.receive_json()["type"] == "user_loading"
        assert a.receive_json()["type"] == "user_joined"

        b.send_json({"type": "pause", "currentTime": 1.0})
        b.send_json({"type": "user_ready"})

        ready = a.receive_json()
        assert ready == {"type": "user_ready", "userId": b_id, "username": "B", "loadingCount": 0}
