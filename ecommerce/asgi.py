"""
ASGI entrypoint: `ecommerce.asgi:app` pour uvicorn/gunicorn (workers uvicorn).
Configure le logging applicatif avant de construire l'app.
"""
import logging
import os

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "info").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from ecommerce.app import app  # noqa: E402

__all__ = ["app"]
