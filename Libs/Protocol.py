# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from typing                    import Annotated, Literal, Union
from pydantic                  import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

# ============== Ortak ==============

class WireModel(BaseModel):
    """Kablo üzerindeki tüm mesajların tabanı (camelCase alanlar, bilinmeyen alanlar atılır)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)

    def wire(self) -> dict:
        """JSON'a yazılacak sözlük"""
        return self.model_dump(by_alias=True)

Seconds = Annotated[float, Field(ge=0.0, allow_inf_nan=False)]

# ============== Client → Server ==============

class JoinRoom(WireModel):
    type      : Literal["join_room"]
    room_id   : str        = Field(min_length=1, max_length=128)
    username  : str        = Field(default="", max_length=64)
    video_url : str | None = Field(default=None, max_length=2048)

class PlaybackEvent(WireModel):
    type         : Literal["play", "pause", "seek"]
    current_time : Seconds
    timestamp    : float = Field(default=0.0, allow_inf_nan=False)

class SignalEvent(WireModel):
    type : Literal["buffering_start", "buffering_end", "user_ready", "sync_request"]

ClientMessage = Annotated[Union[JoinRoom, PlaybackEvent, SignalEvent], Field(discriminator="type")]

_client_adapter = TypeAdapter(ClientMessage)

def parse_client_message(data: dict) -> JoinRoom | PlaybackEvent | SignalEvent:
    """Gelen mesajı doğrula, geçersizse pydantic.ValidationError fırlatır"""
    return _client_adapter.validate_python(data)

# ============== Server → Client ==============

class Connected(WireModel):
    type    : Literal["connected"]
    user_id : str

class RoomState(WireModel):
    type         : Literal["room_state"]
    room_id      : str
    video_url    : str | None = None
    current_time : Seconds    = 0.0
    is_playing   : bool       = False
    user_count   : int        = 1
    is_buffering : bool       = False
    is_loading   : bool       = False

class Presence(WireModel):
    type          : Literal["user_joined", "user_left"]
    user_id       : str
    username      : str = ""
    user_count    : int = 0
    loading_count : int | None = None

class Loading(WireModel):
    type          : Literal["user_loading", "user_ready"]
    user_id       : str
    username      : str = ""
    loading_count : int = 0

class PlaybackCommand(WireModel):
    type         : Literal["play", "pause", "seek"]
    current_time : Seconds
    timestamp    : float = 0.0
    initiated_by : str   = ""

class Buffering(WireModel):
    type            : Literal["buffering_start", "buffering_end"]
    user_id         : str
    username        : str = ""
    buffering_count : int = 0

class ResumeAfterBuffer(WireModel):
    type         : Literal["resume_after_buffer"]
    current_time : Seconds

class SyncResponse(WireModel):
    type         : Literal["sync_response"]
    current_time : Seconds
    is_playing   : bool
    timestamp    : float = 0.0

ServerMessage = Annotated[
    Union[Connected, RoomState, Presence, Loading, PlaybackCommand, Buffering, ResumeAfterBuffer, SyncResponse],
    Field(discriminator="type")
]

_server_adapter = TypeAdapter(ServerMessage)

def parse_server_message(data: dict):
    """Sunucudan gelen mesajı doğrula, geçersizse pydantic.ValidationError fırlatır"""
    return _server_adapter.validate_python(data)
