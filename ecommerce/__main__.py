"""
Lancement local du backend checkout.

Usage:
    python -m ecommerce

Variables d'environnement:
- PORT: port d'écoute (par défaut 8000)
- UVICORN_RELOAD: reload auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs (ex: "info", "debug"), appliqué aussi aux loggers ecommerce.*
"""
import os
import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "ecommerce.asgi:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 8000)),
        reload=os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes"),
        log_level=os.environ.get("LOG_LEVEL", "info"),
    )
