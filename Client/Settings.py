# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pydantic_settings import BaseSettings, SettingsConfigDict

class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SYNCWATCH_", env_file=".env", extra="ignore")

    server_url         : str   = "ws://127.0.0.1:3310/sync"
    sync_tolerance     : float = 1.0   # sn, bu farkın üstünde seek
    debounce_delay     : float = 0.3   # sn
    echo_ttl           : float = 1.0   # sn, yankı token'ının ömrü
    ready_timeout      : float = 3.0   # sn
    reconnect_attempts : int   = 5
    reconnect_delay    : float = 1.0   # sn
    store_path         : str   = ".syncwatch_room.json"
