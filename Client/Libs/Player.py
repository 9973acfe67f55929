# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from typing     import Any, Callable, Protocol
from .Scheduler import Scheduler

HAVE_NOTHING      = 0
HAVE_METADATA     = 1
HAVE_CURRENT_DATA = 2
HAVE_FUTURE_DATA  = 3
HAVE_ENOUGH_DATA  = 4

PLAYER_EVENTS = ("play", "pause", "seeked", "waiting", "canplay", "playing", "canplaythrough")

class PlayerCapability(Protocol):
    """Senkron ajanının oynatıcıdan beklediği asgari yüzey"""
    current_time : float
    paused       : bool
    ready_state  : int

    def play(self) -> None: ...
    def pause(self) -> None: ...
    def on(self, event: str, callback: Callable[[], Any]) -> None: ...
    def off(self, event: str, callback: Callable[[], Any]) -> None: ...


class SimulatedPlayer:
    """
    Tarayıcı video elementini taklit eden bellek içi oynatıcı.

    Olaylar tarayıcıdaki gibi çağrı anında değil, zamanlayıcı üzerinden bir sonraki
    turda tetiklenir. `play`/`pause` durum değiştirmiyorsa olay üretmez.
    """

    def __init__(self, scheduler: Scheduler, ready_state: int = HAVE_ENOUGH_DATA):
        self.scheduler   = scheduler
        self.ready_state = ready_state
        self.paused      = True
        self._time       = 0.0
        self._listeners: dict[str, list[Callable[[], Any]]] = {event: [] for event in PLAYER_EVENTS}

    @property
    def current_time(self) -> float:
        return self._time

    @current_time.setter
    def current_time(self, value: float) -> None:
        self._time = max(0.0, float(value))
        self._dispatch("seeked")

    def play(self) -> None:
        if not self.paused:
            return
        self.paused = False
        self._dispatch("play")
        if self.ready_state >= HAVE_FUTURE_DATA:
            self._dispatch("playing")

    def pause(self) -> None:
        if self.paused:
            return
        self.paused = True
        self._dispatch("pause")

    def on(self, event: str, callback: Callable[[], Any]) -> None:
        self._listeners.setdefault(event, []).append(callback)

    def off(self, event: str, callback: Callable[[], Any]) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def stall(self) -> None:
        """Ağ takıldı: veri bitti"""
        self.ready_state = HAVE_CURRENT_DATA
        self._dispatch("waiting")

    def recover(self) -> None:
        """Veri tekrar yeterli"""
        self.ready_state = HAVE_ENOUGH_DATA
        self._dispatch("canplay")
        self._dispatch("canplaythrough")
        if not self.paused:
            self._dispatch("playing")

    def _dispatch(self, event: str) -> None:
        self.scheduler.call_later(0, self._fire, event)

    def _fire(self, event: str) -> None:
        for callback in list(self._listeners.get(event, [])):
            callback()
