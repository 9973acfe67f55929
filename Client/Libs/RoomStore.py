# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI     import konsol
from pathlib import Path
import json, time

class RoomStore:
    """Sayfa yenilemelerinde aktif odayı hatırlayan tek kayıtlık JSON deposu"""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def save(self, room_id: str, url: str | None) -> None:
        kayit = {
            "roomId"    : room_id,
            "url"       : url,
            "timestamp" : int(time.time() * 1000),
        }
        self.path.write_text(json.dumps(kayit, ensure_ascii=False), encoding="utf-8")

    def load(self, url: str | None) -> str | None:
        """Kayıtlı oda aynı video için tutulmuşsa id'sini döndür"""
        if not self.path.exists():
            return None

        try:
            kayit = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as hata:
            konsol.log(f"[yellow]Oda kaydı okunamadı:[/] {hata}")
            return None

        if not isinstance(kayit, dict) or not kayit.get("roomId"):
            return None

        if kayit.get("url") != url:
            return None

        return kayit["roomId"]

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
