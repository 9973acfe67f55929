# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from typing   import Any, Callable
from pydantic import ValidationError
from Libs     import parse_server_message
import json, asyncio, websockets


class Transport:
    """
    Otomatik yeniden bağlanan, olay isimli çift yönlü kanal.

    `connect` olayı sunucu peer kimliğini (`connected{userId}`) bildirdiğinde tetiklenir.
    Ardışık başarısız deneme sayısı `attempts`'i aşınca vazgeçilir; her başarılı
    bağlantı sayacı sıfırlar. Denemeler arası bekleme sabittir (`delay`).
    """

    def __init__(self, url: str, attempts: int = 5, delay: float = 1.0):
        self.url       = url
        self.attempts  = attempts
        self.delay     = delay
        self.peer_id   = None
        self.connected = False
        self.gave_up   = False
        self._ws       = None
        self._closing  = False
        self._failures = 0
        self._handlers: dict[str, list[Callable[..., Any]]] = {}
        self._tasks: set[asyncio.Task] = set()

    # ============== Olaylar ==============

    def on(self, event: str, callback: Callable[..., Any]) -> None:
        self._handlers.setdefault(event, []).append(callback)

    def off(self, event: str) -> None:
        self._handlers.pop(event, None)

    def _trigger(self, event: str, *args) -> None:
        for callback in list(self._handlers.get(event, [])):
            try:
                callback(*args)
            except Exception as hata:
                konsol.log(f"[red]'{event}' işleyici hatası:[/] {type(hata).__name__} » {hata}")

    # ============== Gönderim ==============

    def emit(self, event: str, payload: dict | None = None) -> bool:
        """Bağlıysa gönder, onay beklemeden döner"""
        if not self.connected or self._ws is None:
            return False

        text = json.dumps({"type": event, **(payload or {})}, ensure_ascii=False)
        task = asyncio.get_running_loop().create_task(self._ws.send(text))
        self._tasks.add(task)
        task.add_done_callback(self._send_done)
        return True

    def _send_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        if exc := task.exception():
            konsol.log(f"[red]Gönderim hatası:[/] {type(exc).__name__}")

    # ============== Bağlantı döngüsü ==============

    async def run(self) -> None:
        self._closing = False
        self.gave_up  = False
        self._failures = 0

        while not self._closing:
            try:
                self._ws = await websockets.connect(self.url)
            except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as hata:
                konsol.log(f"[red]Bağlantı hatası:[/] {type(hata).__name__} » {hata}")
                self._trigger("connect_error", hata)
                if not await self._backoff():
                    break
                continue

            try:
                async for raw in self._ws:
                    self._dispatch(raw)
            except websockets.exceptions.ConnectionClosed:
                pass
            finally:
                was_connected  = self.connected
                self.connected = False
                self.peer_id   = None
                self._ws       = None
                if was_connected:
                    konsol.log("[yellow]Sunucu bağlantısı koptu[/]")
                    self._trigger("disconnect")

            if self._closing or not await self._backoff():
                break

    async def _backoff(self) -> bool:
        """Bir deneme daha hakkı varsa bekle ve True döndür"""
        self._failures += 1
        if self._failures > self.attempts:
            self.gave_up = True
            konsol.log(f"[bold red]{self.attempts} denemeden sonra vazgeçildi, bağlı değil.[/]")
            return False

        await asyncio.sleep(self.delay)
        return not self._closing

    def _dispatch(self, raw: str | bytes) -> None:
        try:
            data    = json.loads(raw)
            message = parse_server_message(data)
        except (json.JSONDecodeError, ValidationError, TypeError) as hata:
            konsol.log(f"[yellow]Geçersiz sunucu mesajı atlandı:[/] {type(hata).__name__}")
            return

        if message.type == "connected":
            self.peer_id   = message.user_id
            self.connected = True
            self._failures = 0
            konsol.log(f"[green]Sunucuya bağlanıldı[/] » {self.peer_id}")
            self._trigger("connect")
            return

        self._trigger(message.type, message)

    async def close(self) -> None:
        """Elle kapatma: yeniden bağlanma yapılmaz"""
        self._closing = True
        if self._ws is not None:
            await self._ws.close()
