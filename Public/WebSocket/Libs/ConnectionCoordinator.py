# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI           import konsol
from Libs          import JoinRoom, PlaybackEvent, SignalEvent
from .RoomRegistry import RoomRegistry
from .PeerHub      import PeerHub
import time


class ConnectionCoordinator:
    """Bir peer'ın protokol olaylarını oda mutasyonlarına ve yayınlara çevirir"""

    def __init__(self, peer_id: str, registry: RoomRegistry, hub: PeerHub):
        self.peer_id  = peer_id
        self.registry = registry
        self.hub      = hub
        self.room_id  = None

    @property
    def joined(self) -> bool:
        return self.room_id is not None

    async def send_json(self, data: dict):
        await self.hub.send(self.peer_id, data)

    async def send_hello(self):
        """Bağlantı kurulunca peer'a kimliğini bildir"""
        await self.send_json({"type": "connected", "userId": self.peer_id})

    # ============== Handlers ==============

    async def handle_join(self, message: JoinRoom):
        """JOIN_ROOM mesajını işle"""
        # Tek oda kuralı: önce eski odadan ayrılmış gibi davran
        if self.joined:
            await self._leave_current()

        username = message.username or f"Misafir-{self.peer_id[:4]}"
        joined   = await self.registry.join(self.peer_id, message.room_id, username, message.video_url)
        self.room_id = joined["room_id"]

        # Mevcut üyeler durup yeni geleni bekler
        if joined["needs_ready"]:
            await self.hub.broadcast(joined["recipients"], {
                "type"         : "user_loading",
                "userId"       : self.peer_id,
                "username"     : username,
                "loadingCount" : joined["loading_count"],
            }, exclude_peer_id=self.peer_id)

        await self.send_json({
            "type"        : "room_state",
            "roomId"      : joined["room_id"],
            "videoUrl"    : joined["video_url"],
            "currentTime" : joined["current_time"],
            "isPlaying"   : joined["is_playing"],
            "userCount"   : joined["user_count"],
            "isBuffering" : joined["is_buffering"],
            "isLoading"   : joined["is_loading"],
        })

        await self.hub.broadcast(joined["recipients"], {
            "type"      : "user_joined",
            "userId"    : self.peer_id,
            "username"  : username,
            "userCount" : joined["user_count"],
        }, exclude_peer_id=self.peer_id)

        konsol.log(f"[green][Oda][/] {username} ({self.peer_id}) » {self.room_id} | Kullanıcı: {joined['user_count']}")

    async def handle_play(self, message: PlaybackEvent):
        """PLAY mesajını işle"""
        await self._relay_playback(message, is_playing=True)

    async def handle_pause(self, message: PlaybackEvent):
        """PAUSE mesajını işle"""
        await self._relay_playback(message, is_playing=False)

    async def handle_seek(self, message: PlaybackEvent):
        """SEEK mesajını işle - oynatım durumuna dokunmaz"""
        await self._relay_playback(message, is_playing=None)

    async def _relay_playback(self, message: PlaybackEvent, is_playing: bool | None):
        result = await self.registry.update_playback(self.peer_id, message.current_time, is_playing)
        if not result:
            return

        session = result["session"]

        # Gönderen hariç herkese
        await self.hub.broadcast(result["recipients"], {
            "type"        : message.type,
            "currentTime" : message.current_time,
            "timestamp"   : message.timestamp,
            "initiatedBy" : self.peer_id,
        }, exclude_peer_id=self.peer_id)

        konsol.log(f"[cyan][{message.type.title()}][/] {session.room_id} » {message.current_time:.2f}s")

    async def handle_buffering_start(self):
        """BUFFERING_START mesajını işle"""
        result = await self.registry.set_buffering(self.peer_id, True)
        if not result:
            return

        session = result["session"]
        await self.hub.broadcast(result["recipients"], {
            "type"           : "buffering_start",
            "userId"         : self.peer_id,
            "username"       : session.username,
            "bufferingCount" : result["buffering_count"],
        })

        konsol.log(f"[yellow][Buffering][/] {session.room_id} » {session.username} başladı | Toplam: {result['buffering_count']}")

    async def handle_buffering_end(self):
        """BUFFERING_END mesajını işle"""
        result = await self.registry.set_buffering(self.peer_id, False)
        if not result:
            return

        session = result["session"]
        await self.hub.broadcast(result["recipients"], {
            "type"           : "buffering_end",
            "userId"         : self.peer_id,
            "username"       : session.username,
            "bufferingCount" : result["buffering_count"],
        })

        if result["should_resume"]:
            await self._resume(session.room_id, result["recipients"], result["current_time"])

        konsol.log(f"[yellow][Buffering][/] {session.room_id} » {session.username} bitti | Toplam: {result['buffering_count']}")

    async def handle_user_ready(self):
        """USER_READY mesajını işle (bariyerin yükleme tarafı)"""
        result = await self.registry.mark_ready(self.peer_id)
        if not result:
            return

        session = result["session"]
        await self.hub.broadcast(result["recipients"], {
            "type"         : "user_ready",
            "userId"       : self.peer_id,
            "username"     : session.username,
            "loadingCount" : result["loading_count"],
        })

        if result["should_resume"]:
            await self._resume(session.room_id, result["recipients"], result["current_time"])

    async def handle_sync_request(self):
        """SYNC_REQUEST mesajını işle - sadece isteyene cevap"""
        snapshot = await self.registry.snapshot(self.peer_id)
        if not snapshot:
            return

        await self.send_json({
            "type"        : "sync_response",
            "currentTime" : snapshot["current_time"],
            "isPlaying"   : snapshot["is_playing"],
            "timestamp"   : int(time.time() * 1000),
        })

    async def handle_disconnect(self):
        """Bağlantı koptuğunda çağrılır"""
        if self.joined:
            await self._leave_current()

    # ============== Yardımcılar ==============

    async def _resume(self, room_id: str, recipients: list[str], current_time: float):
        await self.hub.broadcast(recipients, {
            "type"        : "resume_after_buffer",
            "currentTime" : current_time,
        })
        konsol.log(f"[green][Bariyer][/] {room_id} » herkes hazır, {current_time:.2f}s'den devam")

    async def _leave_current(self):
        """Mevcut odadan ayrılma yan etkileri"""
        self.room_id = None

        result = await self.registry.leave(self.peer_id)
        if not result:
            return

        session = result["session"]

        if result["was_buffering"]:
            await self.hub.broadcast(result["recipients"], {
                "type"           : "buffering_end",
                "userId"         : self.peer_id,
                "username"       : session.username,
                "bufferingCount" : result["buffering_count"],
            })

        if result["should_resume"]:
            await self._resume(session.room_id, result["recipients"], result["current_time"])

        await self.hub.broadcast(result["recipients"], {
            "type"         : "user_left",
            "userId"       : self.peer_id,
            "username"     : session.username,
            "userCount"    : result["user_count"],
            "loadingCount" : result["loading_count"],
        })

        konsol.log(f"[red][Ayrıldı][/] {session.username} ({self.peer_id}) » {session.room_id}")

        if result["room_deleted"]:
            konsol.log(f"[red][Oda][/] {session.room_id} silindi (boş)")
