# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .Scheduler import Scheduler, TimerHandle
from .Debouncer import Debouncer
from .EchoGuard import EchoGuard
from .Player    import PlayerCapability, SimulatedPlayer, HAVE_FUTURE_DATA, HAVE_ENOUGH_DATA
from .ReadyGate import ReadyGate
from .RoomStore import RoomStore
from .Transport import Transport
from .SyncAgent import ClientSyncAgent, SyncState
