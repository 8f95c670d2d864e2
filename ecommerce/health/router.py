from fastapi import APIRouter, Depends, Request

from ecommerce.config import PaymentSettings
from ecommerce.payments.dependencies import get_settings

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/stripe")
def health_stripe(settings: PaymentSettings = Depends(get_settings)):
    # Ne jamais exposer les secrets: uniquement leur présence
    return {
        "secret_key": bool(settings.secret_key),
        "webhook_secret": bool(settings.webhook_secret),
        "currency": settings.currency,
    }

@router.get("/redis")
async def health_redis(request: Request):
    try:
        ok = bool(await request.app.state.redis.ping())
    except Exception as e:
        return {"ok": False, "error": type(e).__name__}
    return {"ok": ok}
