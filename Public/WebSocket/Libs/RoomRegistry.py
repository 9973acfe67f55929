# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from ..Models import Room, UserSession
from .Barrier import is_room_waiting, should_resume
import asyncio, time

class RoomRegistry:
    """
    Oda ve oturum kayıtları.

    Tüm okuma/yazma işlemleri tek bir asyncio.Lock altında tamamlanır; broadcast
    kararları sözlük olarak döndürülür, gönderim lock dışında yapılır. Alıcı listesi
    (`recipients`) mutasyonla aynı lock içinde alınır.
    Bir oda yalnızca en az bir üyesi varken kayıtlıdır.
    """

    def __init__(self):
        self.rooms: dict[str, Room]           = {}
        self.sessions: dict[str, UserSession] = {}
        self._lock = asyncio.Lock()

    # ============== Sorgular ==============

    async def get_room(self, room_id: str) -> Room | None:
        async with self._lock:
            return self.rooms.get(room_id)

    async def get_or_create(self, room_id: str) -> Room:
        """
        Odayı getir ya da boş oluştur. Üyesiz oda kayıtlı kalır: ardından `join`
        gelmeyecekse `remove` ile silinmelidir.
        """
        async with self._lock:
            return self._get_or_create_locked(room_id)

    async def member_count(self, room_id: str) -> int:
        async with self._lock:
            room = self.rooms.get(room_id)
            return len(room.members) if room else 0

    async def member_ids(self, room_id: str) -> list[str]:
        async with self._lock:
            room = self.rooms.get(room_id)
            return list(room.members) if room else []

    async def get_session(self, peer_id: str) -> UserSession | None:
        async with self._lock:
            return self.sessions.get(peer_id)

    async def remove(self, room_id: str) -> bool:
        """Odayı sil - sadece üyesi kalmamışsa"""
        async with self._lock:
            room = self.rooms.get(room_id)
            if not room:
                return False

            if room.members:
                konsol.log(f"[yellow]Dolu oda silinemez:[/] {room_id} ({len(room.members)} üye)")
                return False

            del self.rooms[room_id]
            return True

    async def stats(self) -> dict:
        async with self._lock:
            return {
                "rooms"     : len(self.rooms),
                "peers"     : len(self.sessions),
                "waiting"   : sum(1 for room in self.rooms.values() if is_room_waiting(room)),
                "playing"   : sum(1 for room in self.rooms.values() if room.is_playing),
            }

    # ============== Üyelik ==============

    async def join(self, peer_id: str, room_id: str, username: str, video_url: str | None = None) -> dict:
        """
        Peer'ı odaya kaydet. Önceki oda üyeliği çağıran tarafından kapatılmış olmalı.
        Returns: {"room_id", "video_url", "current_time", "is_playing", "user_count",
                  "is_buffering", "is_loading", "loading_count", "needs_ready", "recipients"}
        """
        async with self._lock:
            room = self._get_or_create_locked(room_id)
            self.sessions[peer_id] = UserSession(peer_id=peer_id, room_id=room_id, username=username)
            room.members.add(peer_id)

            # İlk yazan kazanır
            if video_url and not room.video_url:
                room.video_url = video_url

            # Odada başkaları varsa yeni gelen hazır olana kadar herkes bekler
            needs_ready = len(room.members) > 1
            if needs_ready:
                room.loading_users.add(peer_id)

            return {
                "room_id"       : room.room_id,
                "video_url"     : room.video_url,
                "current_time"  : room.current_time,
                "is_playing"    : room.is_playing,
                "user_count"    : len(room.members),
                "is_buffering"  : bool(room.buffering_users),
                "is_loading"    : bool(room.loading_users),
                "loading_count" : len(room.loading_users),
                "needs_ready"   : needs_ready,
                "recipients"    : list(room.members),
            }

    async def leave(self, peer_id: str) -> dict | None:
        """
        Peer'ın oturumunu ve oda üyeliğini kaldır.
        Returns: None veya {"session", "user_count", "buffering_count", "loading_count",
                            "was_buffering", "should_resume", "current_time", "room_deleted",
                            "recipients"}
        """
        async with self._lock:
            session = self.sessions.pop(peer_id, None)
            if not session:
                return None

            room = self.rooms.get(session.room_id)
            if not room:
                return {
                    "session"         : session,
                    "user_count"      : 0,
                    "buffering_count" : 0,
                    "loading_count"   : 0,
                    "was_buffering"   : False,
                    "should_resume"   : False,
                    "current_time"    : 0.0,
                    "room_deleted"    : False,
                    "recipients"      : [],
                }

            was_waiting   = is_room_waiting(room)
            was_buffering = peer_id in room.buffering_users

            room.members.discard(peer_id)
            room.buffering_users.discard(peer_id)
            room.loading_users.discard(peer_id)

            # Kalan yoksa resume anlamsız
            resume = bool(room.members) and should_resume(was_waiting, room)

            room_deleted = not room.members
            if room_deleted:
                del self.rooms[session.room_id]

            return {
                "session"         : session,
                "user_count"      : len(room.members),
                "buffering_count" : len(room.buffering_users),
                "loading_count"   : len(room.loading_users),
                "was_buffering"   : was_buffering,
                "should_resume"   : resume,
                "current_time"    : room.current_time,
                "room_deleted"    : room_deleted,
                "recipients"      : list(room.members),
            }

    # ============== Oynatım ==============

    async def update_playback(self, peer_id: str, current_time: float, is_playing: bool | None = None) -> dict | None:
        """
        Oda pozisyonunu (ve verildiyse oynatım durumunu) güncelle - son yazan kazanır.
        Returns: None veya {"session", "recipients"}
        """
        async with self._lock:
            session, room = self._resolve_locked(peer_id)
            if not room:
                return None

            room.current_time = current_time
            if is_playing is not None:
                room.is_playing = is_playing
            room.last_update = time.time()
            return {"session": session, "recipients": list(room.members)}

    async def snapshot(self, peer_id: str) -> dict | None:
        """sync_response için oda durumu"""
        async with self._lock:
            _, room = self._resolve_locked(peer_id)
            if not room:
                return None

            return {
                "current_time" : room.current_time,
                "is_playing"   : room.is_playing,
            }

    # ============== Bariyer ==============

    async def set_buffering(self, peer_id: str, is_buffering: bool) -> dict | None:
        """
        Buffering listesini güncelle ve bariyer geçişini değerlendir.
        Returns: None veya {"session", "buffering_count", "should_resume", "current_time", "recipients"}
        """
        async with self._lock:
            session, room = self._resolve_locked(peer_id)
            if not room:
                return None

            was_waiting = is_room_waiting(room)

            if is_buffering:
                room.buffering_users.add(peer_id)
            else:
                room.buffering_users.discard(peer_id)

            return {
                "session"         : session,
                "buffering_count" : len(room.buffering_users),
                "should_resume"   : not is_buffering and should_resume(was_waiting, room),
                "current_time"    : room.current_time,
                "recipients"      : list(room.members),
            }

    async def mark_ready(self, peer_id: str) -> dict | None:
        """
        Peer'ı yüklenenler listesinden çıkar ve bariyer geçişini değerlendir.
        Returns: None veya {"session", "loading_count", "should_resume", "current_time", "recipients"}
        """
        async with self._lock:
            session, room = self._resolve_locked(peer_id)
            if not room:
                return None

            was_waiting = is_room_waiting(room)
            room.loading_users.discard(peer_id)

            return {
                "session"       : session,
                "loading_count" : len(room.loading_users),
                "should_resume" : should_resume(was_waiting, room),
                "current_time"  : room.current_time,
                "recipients"    : list(room.members),
            }

    # ============== Lock içi yardımcılar ==============

    def _get_or_create_locked(self, room_id: str) -> Room:
        room = self.rooms.get(room_id)
        if not room:
            room = Room(room_id=room_id)
            self.rooms[room_id] = room
        return room

    def _resolve_locked(self, peer_id: str) -> tuple[UserSession | None, Room | None]:
        session = self.sessions.get(peer_id)
        if not session:
            return None, None
        return session, self.rooms.get(session.room_id)
