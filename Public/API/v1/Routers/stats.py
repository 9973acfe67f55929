# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core import Request, JSONResponse
from .    import api_v1_router

@api_v1_router.get("/stats")
async def get_stats(request: Request):
    """Oda / peer sayıları"""
    stats = await request.app.state.registry.stats()
    return JSONResponse({"success": True, **stats})
