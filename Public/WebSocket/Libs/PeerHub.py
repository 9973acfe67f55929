# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI           import konsol
from fastapi       import WebSocket
from Settings      import WS_SEND_TIMEOUT
import json, asyncio

class PeerHub:
    """Bağlı peer soketleri ve oda bazlı yayın"""

    def __init__(self, send_timeout: float = WS_SEND_TIMEOUT):
        self.send_timeout = send_timeout
        self.sockets: dict[str, WebSocket] = {}

    def register(self, peer_id: str, websocket: WebSocket) -> None:
        self.sockets[peer_id] = websocket

    def unregister(self, peer_id: str) -> None:
        self.sockets.pop(peer_id, None)

    async def _safe_send(self, peer_id: str, websocket: WebSocket, text: str) -> None:
        """Yavaş veya kopmuş istemci odayı bekletmesin"""
        try:
            await asyncio.wait_for(websocket.send_text(text), timeout=self.send_timeout)
        except Exception as hata:
            konsol.log(f"[yellow]Gönderilemedi:[/] {peer_id} » {type(hata).__name__}")

    async def send(self, peer_id: str, message: dict) -> None:
        """Tek bir peer'a gönder"""
        websocket = self.sockets.get(peer_id)
        if not websocket:
            return

        await self._safe_send(peer_id, websocket, json.dumps(message, ensure_ascii=False))

    async def broadcast(self, recipients: list[str], message: dict, exclude_peer_id: str | None = None) -> None:
        """Mutasyon anında alınmış alıcı listesine gönder (exclude_peer_id hariç)"""
        if not recipients:
            return

        message_str = json.dumps(message, ensure_ascii=False)

        tasks = []
        for peer_id in recipients:
            if exclude_peer_id and peer_id == exclude_peer_id:
                continue

            websocket = self.sockets.get(peer_id)
            if websocket:
                tasks.append(self._safe_send(peer_id, websocket, message_str))

        if tasks:
            await asyncio.gather(*tasks)
