# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from fastapi  import WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from Libs     import parse_client_message
from Settings import WS_MAX_PAYLOAD, WS_GENERAL_RATE, WS_HIGH_FREQ_RATE
from .        import wss_router
from ..Libs   import ConnectionCoordinator
import json, time, uuid

HIGH_FREQ_OPS = {"seek", "buffering_start", "sync_request"}

# Bariyeri serbest bırakan kareler kovaya takılmaz
BARRIER_OPS = {"buffering_end", "user_ready"}

@wss_router.websocket("/sync")
async def sync_websocket(websocket: WebSocket):
    await websocket.accept()

    registry = websocket.app.state.registry
    hub      = websocket.app.state.hub

    peer_id = str(uuid.uuid4())[:8]
    hub.register(peer_id, websocket)
    coordinator = ConnectionCoordinator(peer_id, registry, hub)

    # (needs_session, takes_msg, fn)
    handlers = {
        "join_room"       : (False, True,  coordinator.handle_join),

        "play"            : (True,  True,  coordinator.handle_play),
        "pause"           : (True,  True,  coordinator.handle_pause),
        "seek"            : (True,  True,  coordinator.handle_seek),

        "buffering_start" : (True,  False, coordinator.handle_buffering_start),
        "buffering_end"   : (True,  False, coordinator.handle_buffering_end),
        "user_ready"      : (True,  False, coordinator.handle_user_ready),
        "sync_request"    : (True,  False, coordinator.handle_sync_request),
    }

    # Rate limiting
    general_msg_count = 0
    general_last_time = time.perf_counter()

    high_msg_count = 0
    high_last_time = time.perf_counter()

    konsol.log(f"[green][Bağlantı][/] {peer_id} bağlandı")

    try:
        await coordinator.send_hello()

        while True:
            raw = await websocket.receive_text()

            # 1. Flood Control: Payload Size
            if len(raw.encode("utf-8")) > WS_MAX_PAYLOAD:
                konsol.log(f"[yellow]Mesaj boyutu çok büyük:[/] {peer_id}")
                continue

            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                konsol.log(f"[yellow]Geçersiz JSON formatı:[/] {peer_id}")
                continue

            if not isinstance(msg, dict):
                continue

            t = msg.get("type")
            entry = handlers.get(t)
            if not entry:
                continue

            # 2. Flood Control: Rate Limit (Dual Bucket)
            now = time.perf_counter()

            if t in HIGH_FREQ_OPS:
                if now - high_last_time > 1.0:
                    high_msg_count = 0
                    high_last_time = now

                high_msg_count += 1
                if high_msg_count > WS_HIGH_FREQ_RATE:
                    konsol.log(f"[yellow]Çok hızlı işlem:[/] {peer_id} » {t}")
                    continue
            elif t not in BARRIER_OPS:
                if now - general_last_time > 1.0:
                    general_msg_count = 0
                    general_last_time = now

                general_msg_count += 1
                if general_msg_count > WS_GENERAL_RATE:
                    konsol.log(f"[yellow]Çok hızlı işlem:[/] {peer_id} » {t}")
                    continue

            # 3. Şema doğrulaması: state'e dokunmadan önce
            try:
                message = parse_client_message(msg)
            except ValidationError as hata:
                konsol.log(f"[yellow]Geçersiz mesaj:[/] {peer_id} » {t} | {hata.error_count()} hata")
                continue

            needs_session, takes_msg, fn = entry

            # Oturumu olmayan peer'ın olayları sessizce yok sayılır
            if needs_session and not coordinator.joined:
                continue

            if takes_msg:
                await fn(message)
            else:
                await fn()

    except WebSocketDisconnect:
        pass
    except Exception as e:
        konsol.log(f"[red]WebSocket Error:[/] {e}")
    finally:
        await coordinator.handle_disconnect()
        hub.unregister(peer_id)
        konsol.log(f"[red][Bağlantı][/] {peer_id} ayrıldı")
