# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .SyncModels import Room, UserSession
