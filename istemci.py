# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI             import konsol, cikis_yap, hata_yakala
from Client.Settings import ClientSettings
from Client.Libs     import Transport, SimulatedPlayer, RoomStore, ClientSyncAgent
import asyncio, sys

async def izle(room_id: str | None, video_url: str | None):
    ayar = ClientSettings()
    loop = asyncio.get_running_loop()

    transport = Transport(ayar.server_url, attempts=ayar.reconnect_attempts, delay=ayar.reconnect_delay)
    player    = SimulatedPlayer(loop)
    agent     = ClientSyncAgent(
        transport, player, loop,
        video_url      = video_url,
        store          = RoomStore(ayar.store_path),
        sync_tolerance = ayar.sync_tolerance,
        debounce_delay = ayar.debounce_delay,
        echo_ttl       = ayar.echo_ttl,
        ready_timeout  = ayar.ready_timeout,
    )

    if room_id:
        agent.join_room(room_id)
    elif not agent.restore():
        konsol.log(f"[cyan]Yeni oda:[/] {agent.create_room()}")

    try:
        await transport.run()
    finally:
        agent.close()

if __name__ == "__main__":
    try:
        asyncio.run(izle(
            room_id   = sys.argv[1] if len(sys.argv) > 1 else None,
            video_url = sys.argv[2] if len(sys.argv) > 2 else None,
        ))
        cikis_yap(False)
    except KeyboardInterrupt:
        cikis_yap(False)
    except Exception as hata:
        hata_yakala(hata)
