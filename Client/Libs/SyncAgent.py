# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI         import konsol
from dataclasses import dataclass, asdict
from .Scheduler  import Scheduler
from .Player     import PlayerCapability
from .Debouncer  import Debouncer
from .EchoGuard  import EchoGuard
from .ReadyGate  import ReadyGate
from .RoomStore  import RoomStore
import random, string, time


@dataclass
class SyncState:
    """Sayfa başına istemci senkron durumu"""
    room_id           : str | None = None
    username          : str        = ""
    is_connected      : bool       = False
    is_buffering      : bool       = False
    partner_buffering : bool       = False
    partner_loading   : bool       = False
    is_ready          : bool       = False


def _random_suffix(n: int = 6) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=n))


class ClientSyncAgent:
    """
    Yerel oynatıcı olaylarını protokol mesajlarına, uzak komutları oynatıcı
    eylemlerine çevirir.

    Uzak komutlar EchoGuard üzerinden uygulanır: oynatıcının ürettiği yankı olayı
    token tüketilerek yutulur, yalnızca gerçek kullanıcı eylemleri debounce edilip
    sunucuya gider.
    """

    def __init__(
        self,
        transport,
        player: PlayerCapability,
        scheduler: Scheduler,
        *,
        video_url: str | None = None,
        username: str | None  = None,
        store: RoomStore | None = None,
        sync_tolerance: float = 1.0,
        debounce_delay: float = 0.3,
        echo_ttl: float       = 1.0,
        ready_timeout: float  = 3.0,
    ):
        self.transport      = transport
        self.player         = player
        self.scheduler      = scheduler
        self.video_url      = video_url
        self.store          = store
        self.sync_tolerance = sync_tolerance

        self.state = SyncState(username=username or f"User_{_random_suffix()}")
        self.echo  = EchoGuard(scheduler, ttl=echo_ttl)
        self.ready = ReadyGate(player, scheduler, self._signal_ready, timeout=ready_timeout)

        self._emitters = {
            kind: Debouncer(debounce_delay, self._emit_playback, scheduler)
            for kind in ("play", "pause", "seek")
        }

        self._bind_transport()
        self._bind_player()

    # ============== Bağlama ==============

    def _bind_transport(self) -> None:
        on = self.transport.on
        on("connect",             self._on_connect)
        on("disconnect",          self._on_disconnect)
        on("connect_error",       self._on_connect_error)

        on("room_state",          self._on_room_state)
        on("play",                self._on_play)
        on("pause",               self._on_pause)
        on("seek",                self._on_seek)
        on("buffering_start",     self._on_buffering_start)
        on("buffering_end",       self._on_buffering_end)
        on("resume_after_buffer", self._on_resume_after_buffer)
        on("user_joined",         self._on_user_joined)
        on("user_left",           self._on_user_left)
        on("user_loading",        self._on_user_loading)
        on("user_ready",          self._on_user_ready)
        on("sync_response",       self._on_sync_response)

    def _bind_player(self) -> None:
        on = self.player.on
        on("play",    self._local_play)
        on("pause",   self._local_pause)
        on("seeked",  self._local_seeked)
        on("waiting", self._local_waiting)
        on("canplay", self._local_buffering_end)
        on("playing", self._local_buffering_end)

    # ============== Oda API ==============

    def restore(self) -> str | None:
        """Kayıtlı oda aynı video içinse hatırla (bağlanınca katılınır)"""
        if not self.store or self.state.room_id:
            return None

        room_id = self.store.load(self.video_url)
        if room_id:
            self.state.room_id = room_id
            konsol.log(f"[cyan]Kayıtlı odaya dönülecek:[/] {room_id}")
        return room_id

    def join_room(self, room_id: str) -> bool:
        self.state.room_id = room_id

        if not self.state.is_connected:
            konsol.log(f"[yellow]Bağlı değil, bağlanınca katılınacak:[/] {room_id}")
            return False

        if self.store:
            self.store.save(room_id, self.video_url)

        # Her katılım yeni bir hazır el sıkışması
        self.state.is_ready = False
        self.ready.cancel()

        payload = {"roomId": room_id, "username": self.state.username}
        if self.video_url:
            payload["videoUrl"] = self.video_url

        self.transport.emit("join_room", payload)
        konsol.log(f"[green]Odaya katılınıyor:[/] {room_id}")
        return True

    def create_room(self) -> str:
        room_id = f"room_{int(time.time() * 1000)}_{_random_suffix()}"
        self.join_room(room_id)
        return room_id

    async def leave_room(self) -> None:
        self.state.room_id = None
        self.ready.cancel()
        if self.store:
            self.store.clear()
        await self.transport.close()

    def request_sync(self) -> bool:
        return self.transport.emit("sync_request")

    def set_username(self, name: str) -> None:
        self.state.username = name

    def get_state(self) -> dict:
        state = asdict(self.state)
        return {
            "isConnected"      : state["is_connected"],
            "roomId"           : state["room_id"],
            "username"         : state["username"],
            "isBuffering"      : state["is_buffering"],
            "partnerBuffering" : state["partner_buffering"],
            "partnerLoading"   : state["partner_loading"],
            "isReady"          : state["is_ready"],
            "socketId"         : self.transport.peer_id,
        }

    def close(self) -> None:
        """Bekleyen tüm zamanlayıcıları bırak"""
        for emitter in self._emitters.values():
            emitter.cancel()
        self.echo.clear()
        self.ready.cancel()

    # ============== Transport olayları ==============

    def _on_connect(self) -> None:
        self.state.is_connected = True
        self.state.is_ready     = False

        if self.state.room_id:
            self.join_room(self.state.room_id)

    def _on_disconnect(self) -> None:
        self.state.is_connected = False
        self.ready.cancel()

    def _on_connect_error(self, hata: Exception) -> None:
        self.state.is_connected = False

    def _on_room_state(self, message) -> None:
        konsol.log(f"[cyan]Oda durumu:[/] {message.room_id} | {message.current_time:.2f}s | oynatılıyor={message.is_playing} | kullanıcı={message.user_count}")

        self._reconcile(message.current_time)

        # Katılan bariyerde bekler, devam komutu sunucudan gelir
        self._remote_pause()

        self.ready.arm()

    def _on_play(self, message) -> None:
        konsol.log(f"[cyan]Play komutu:[/] {message.current_time:.2f}s")
        self._reconcile(message.current_time)
        self._remote_play()

    def _on_pause(self, message) -> None:
        konsol.log(f"[cyan]Pause komutu:[/] {message.current_time:.2f}s")
        self._remote_pause()
        self._reconcile(message.current_time)

    def _on_seek(self, message) -> None:
        konsol.log(f"[cyan]Seek komutu:[/] {message.current_time:.2f}s")
        self._remote_seek(message.current_time)

    def _on_buffering_start(self, message) -> None:
        if message.user_id == self.transport.peer_id:
            return

        konsol.log(f"[yellow]Partner buffering:[/] {message.username}")
        self.state.partner_buffering = True
        self._remote_pause()

    def _on_buffering_end(self, message) -> None:
        if message.buffering_count == 0:
            self.state.partner_buffering = False

    def _on_resume_after_buffer(self, message) -> None:
        konsol.log("[green]Herkes hazır, devam ediliyor[/]")
        self.state.partner_buffering = False
        self.state.partner_loading   = False
        self._reconcile(message.current_time)
        self._remote_play()

    def _on_user_joined(self, message) -> None:
        konsol.log(f"[green]{message.username} katıldı[/] | Kullanıcı: {message.user_count}")

    def _on_user_left(self, message) -> None:
        konsol.log(f"[red]{message.username} ayrıldı[/] | Kullanıcı: {message.user_count}")
        if message.loading_count == 0:
            self.state.partner_loading = False

    def _on_user_loading(self, message) -> None:
        if message.user_id == self.transport.peer_id:
            return

        konsol.log(f"[yellow]Partner yükleniyor:[/] {message.username}")
        self.state.partner_loading = True
        self._remote_pause()

    def _on_user_ready(self, message) -> None:
        if message.loading_count == 0:
            self.state.partner_loading = False

    def _on_sync_response(self, message) -> None:
        self._reconcile(message.current_time)
        if message.is_playing:
            self._remote_play()
        else:
            self._remote_pause()

    # ============== Uzak eylemler (yankısı bastırılır) ==============

    def _reconcile(self, remote_time: float) -> None:
        if abs(self.player.current_time - remote_time) > self.sync_tolerance:
            self._remote_seek(remote_time)

    def _remote_seek(self, remote_time: float) -> None:
        self.echo.expect("seeked")
        self.player.current_time = remote_time

    def _remote_play(self) -> None:
        if not self.player.paused:
            return
        self.echo.expect("play")
        self.player.play()

    def _remote_pause(self) -> None:
        if self.player.paused:
            return
        self.echo.expect("pause")
        self.player.pause()

    # ============== Yerel oynatıcı olayları ==============

    def _local_play(self) -> None:
        if self.echo.consume("play"):
            return
        self._emitters["play"]("play")

    def _local_pause(self) -> None:
        if self.echo.consume("pause"):
            return
        self._emitters["pause"]("pause")

    def _local_seeked(self) -> None:
        if self.echo.consume("seeked"):
            return
        self._emitters["seek"]("seek")

    def _local_waiting(self) -> None:
        if self.state.is_buffering:
            return
        self.state.is_buffering = True
        konsol.log("[yellow]Buffering başladı[/]")
        self.transport.emit("buffering_start")

    def _local_buffering_end(self) -> None:
        if not self.state.is_buffering:
            return
        self.state.is_buffering = False
        konsol.log("[green]Buffering bitti[/]")
        self.transport.emit("buffering_end")

    def _emit_playback(self, kind: str) -> None:
        if not self.state.is_connected:
            return

        konsol.log(f"[magenta]{kind} gönderiliyor[/] » {self.player.current_time:.2f}s")
        self.transport.emit(kind, {
            "currentTime" : self.player.current_time,
            "timestamp"   : int(time.time() * 1000),
        })

    def _signal_ready(self) -> None:
        if self.state.is_ready or not self.state.is_connected:
            return

        self.state.is_ready = True
        self.transport.emit("user_ready")
        konsol.log("[green]Sunucuya hazır bildirildi[/]")
