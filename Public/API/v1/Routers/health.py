# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core     import Request, JSONResponse
from Settings import PROJE
from .        import api_v1_router

@api_v1_router.get("/health")
async def health_check(request: Request):
    """Relay ayakta mı, kayıt defteri hazır mı"""
    ready = getattr(request.app.state, "registry", None) is not None
    return JSONResponse({"success": ready, "status": "healthy" if ready else "starting", "service": PROJE})
