# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from ..Models import Room

def is_room_waiting(room: Room) -> bool:
    """Oda buffering veya yüklenen bir kullanıcıyı bekliyor mu?"""
    return bool(room.buffering_users or room.loading_users)

def should_resume(was_waiting: bool, room: Room) -> bool:
    """Bariyer bekliyor → serbest geçişi oldu ve oda oynatılıyorsa devam edilmeli"""
    return was_waiting and not is_room_waiting(room) and room.is_playing
