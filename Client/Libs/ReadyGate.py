# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from typing     import Any, Callable
from .Scheduler import Scheduler, TimerHandle
from .Player    import PlayerCapability, HAVE_FUTURE_DATA

class ReadyGate:
    """
    Bariyerin istemci yarısı: oynatıcı yeterince veri tuttuğunda (ya da `timeout`
    dolduğunda) `on_ready` bir kez çağrılır. Hangisi önce gelirse.
    """

    def __init__(self, player: PlayerCapability, scheduler: Scheduler, on_ready: Callable[[], Any], timeout: float = 3.0):
        self.player    = player
        self.scheduler = scheduler
        self.on_ready  = on_ready
        self.timeout   = timeout
        self._timer: TimerHandle | None = None
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        self.cancel()

        if self.player.ready_state >= HAVE_FUTURE_DATA:
            self.on_ready()
            return

        self._armed = True
        self.player.on("canplaythrough", self._release)
        self._timer = self.scheduler.call_later(self.timeout, self._release)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._armed:
            self.player.off("canplaythrough", self._release)
            self._armed = False

    def _release(self) -> None:
        if not self._armed:
            return
        self.cancel()
        self.on_ready()
