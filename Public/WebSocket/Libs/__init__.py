# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .Barrier               import is_room_waiting, should_resume
from .RoomRegistry          import RoomRegistry
from .PeerHub               import PeerHub
from .ConnectionCoordinator import ConnectionCoordinator
