# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                   import konsol
from fastapi               import FastAPI
from contextlib            import asynccontextmanager
from Public.WebSocket.Libs import RoomRegistry, PeerHub

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan events - startup ve shutdown"""

    # Her uygulama ömrü kendi kayıt defterini alır
    app.state.registry = RoomRegistry()
    app.state.hub      = PeerHub()

    yield

    stats = await app.state.registry.stats()
    konsol.log(f"[yellow]Kapanıyor:[/] {stats['rooms']} oda, {stats['peers']} peer bellekten düşüldü")
