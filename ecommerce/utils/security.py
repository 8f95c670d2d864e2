import logging
from typing import Dict, Any, Optional

from fastapi import Request, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool

from ecommerce.infra.supabase_client import get_supabase

logger = logging.getLogger(__name__)

COOKIE_NAME = "sb_access"

def token_from_request(request: Request) -> Optional[str]:
    # Hybride: priorité au Bearer, fallback cookie
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return request.cookies.get(COOKIE_NAME)

def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """Récupère et normalise l’utilisateur depuis supabase.auth.get_user(access_token)."""
    res = get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None)
    if user is None:
        return {}
    return {
        "id": getattr(user, "id", None),
        "email": getattr(user, "email", None),
        "metadata": getattr(user, "user_metadata", None) or {},
    }

async def get_current_user(request: Request) -> Dict[str, Any]:
    token = token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Non authentifié")

    try:
        user = await run_in_threadpool(get_user_from_token, token)
    except Exception:
        logger.info("security.get_current_user token rejected")
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")
    if not user.get("id"):
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")
    return user

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user
