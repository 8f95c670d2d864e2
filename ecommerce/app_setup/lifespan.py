"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Client Redis (paniers + rate limiting) exposé dans app.state.redis.
- Verrous par panier (local + Redis, partagés entre workers) exposés dans app.state.basket_locks.
- Initialise FastAPILimiter avec options de test.
- Variables d’environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive le rate limiting (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l’init échoue
"""
import os
import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from ecommerce.config import BASKET_LOCK_TIMEOUT_SECONDS, BASKET_LOCK_WAIT_SECONDS, REDIS_URL
from ecommerce.payments.service import BasketLocks

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

def create_redis():
    if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
        if not FakeRedis:
            raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
        return FakeRedis(decode_responses=True)
    return aioredis.from_url(REDIS_URL, encoding="utf-8", decode_responses=True)

async def init_rate_limiter(app: FastAPI, r, logger: logging.Logger) -> None:
    """
    Configure le rate limiting et gère les fallbacks.
    - En cas d’échec de Redis et sans fallback, le rate limiting est désactivé proprement.
    """
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return
    try:
        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning("Rate limiting falling back to local in-memory due to init error: %s", e)
        else:
            app.state.rate_limit_enabled = False
            logger.warning("Rate limiting disabled due to init error: %s", e)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("uvicorn.error")
    r = create_redis()
    app.state.redis = r
    app.state.basket_locks = BasketLocks(
        r, timeout_seconds=BASKET_LOCK_TIMEOUT_SECONDS, wait_seconds=BASKET_LOCK_WAIT_SECONDS
    )
    await init_rate_limiter(app, r, logger)
    try:
        yield
    finally:
        await r.aclose()
