# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .Protocol import (
    WireModel, JoinRoom, PlaybackEvent, SignalEvent, parse_client_message,
    Connected, RoomState, Presence, Loading, PlaybackCommand, Buffering,
    ResumeAfterBuffer, SyncResponse, parse_server_message
)
