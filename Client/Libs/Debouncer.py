# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from typing     import Any, Callable
from .Scheduler import Scheduler, TimerHandle

class Debouncer:
    """
    Pencere içindeki ardışık çağrıları tek çağrıya indirger.

    Her yeni çağrı bekleyen çağrıyı iptal edip yerine geçer (son argümanlar kazanır);
    callback yalnızca `window` saniye boyunca yeni çağrı gelmezse çalışır.
    """

    def __init__(self, window: float, callback: Callable[..., Any], scheduler: Scheduler):
        self.window    = window
        self.callback  = callback
        self.scheduler = scheduler
        self._handle: TimerHandle | None = None
        self._args: tuple = ()
        self._kwargs: dict = {}

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args, **kwargs) -> None:
        self.cancel()
        self._args   = args
        self._kwargs = kwargs
        self._handle = self.scheduler.call_later(self.window, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Bekleyen çağrıyı hemen çalıştır"""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def _fire(self) -> None:
        self._handle = None
        args, kwargs = self._args, self._kwargs
        self._args, self._kwargs = (), {}
        self.callback(*args, **kwargs)
