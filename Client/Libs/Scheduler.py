# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from typing import Any, Callable, Protocol

class TimerHandle(Protocol):
    def cancel(self) -> None: ...

class Scheduler(Protocol):
    """Zamanlayıcı arayüzü - asyncio event loop'ları birebir karşılar"""
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...
