# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
import time

@dataclass
class UserSession:
    """Bağlı bir peer'ın aktif oda kaydı"""
    peer_id  : str
    room_id  : str
    username : str

@dataclass
class Room:
    """Senkron izleme odası"""
    room_id         : str
    video_url       : str | None = None    # İlk yazan kazanır, bir daha değişmez
    current_time    : float      = 0.0
    is_playing      : bool       = False   # Bariyerde beklerken de niyet edilen durumu tutar
    members         : set[str]   = field(default_factory=set)
    buffering_users : set[str]   = field(default_factory=set)
    loading_users   : set[str]   = field(default_factory=set)
    last_update     : float      = field(default_factory=time.time)
