"""
Gestionnaires d’exceptions de l’API.
- HTTPException -> JSON {"status_code", "message"} (forme unique pour les clients).
- Exception non gérée -> 500 JSON, trace dans les logs (jamais dans la réponse).
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES = {
    400: "Requête invalide",
    401: "Non authentifié",
    403: "Accès interdit",
    404: "Ressource introuvable",
    409: "Conflit",
    429: "Trop de requêtes",
    500: "Erreur interne",
}

def api_error(status_code: int, message: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status_code": status_code, "message": message or DEFAULT_MESSAGES.get(status_code, "Erreur")},
    )

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return api_error(exc.status_code, str(exc.detail) if exc.detail else None)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return api_error(500)
