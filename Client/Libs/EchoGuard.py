# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .Scheduler import Scheduler, TimerHandle
import uuid

class EchoGuard:
    """
    Uzaktan uygulanan komutların yerel yankısını yakalar.

    Oynatıcıya uygulanan her uzak komut için beklenen olay türüyle bir token kaydedilir;
    yerel dinleyici eşleşen token'ı tüketir ve olayı yutar. Tüketilmeyen token'lar
    `ttl` sonunda düşer, böylece hiç gelmeyen bir yankı sonraki gerçek kullanıcı
    eylemini yutmaz.
    """

    def __init__(self, scheduler: Scheduler, ttl: float = 1.0):
        self.scheduler = scheduler
        self.ttl       = ttl
        # token -> (kind, expiry handle), ekleme sırası korunur
        self._pending: dict[str, tuple[str, TimerHandle]] = {}

    def expect(self, kind: str) -> str:
        """`kind` olayının yankısını bekle, token döndür"""
        token  = uuid.uuid4().hex
        handle = self.scheduler.call_later(self.ttl, self._expire, token)
        self._pending[token] = (kind, handle)
        return token

    def consume(self, kind: str) -> bool:
        """Olay bir yankıysa en eski eşleşen token'ı tüket ve True döndür"""
        for token, (pending_kind, handle) in self._pending.items():
            if pending_kind == kind:
                handle.cancel()
                del self._pending[token]
                return True
        return False

    def pending(self, kind: str | None = None) -> int:
        if kind is None:
            return len(self._pending)
        return sum(1 for pending_kind, _ in self._pending.values() if pending_kind == kind)

    def clear(self) -> None:
        for _, handle in self._pending.values():
            handle.cancel()
        self._pending.clear()

    def _expire(self, token: str) -> None:
        self._pending.pop(token, None)
