"""
Stockage des paniers dans Redis.
- Un panier = un document JSON sous la clé 'basket:<id>', avec expiration (TTL).
- Chaque écriture repousse l'expiration.
"""
import logging
from datetime import timedelta
from typing import Optional

from pydantic import ValidationError
from redis.asyncio import Redis

from ecommerce.baskets.models import Basket
from ecommerce.utils.money import EXACT_MONEY

logger = logging.getLogger(__name__)

KEY_PREFIX = "basket:"

# module ecommerce.baskets.repository
def basket_key(basket_id: str) -> str:
    return f"{KEY_PREFIX}{basket_id}"


class RedisBasketStore:
    def __init__(self, redis: Redis, ttl_days: int = 30):
        self.redis = redis
        self.ttl = timedelta(days=ttl_days)

    async def get(self, basket_id: str) -> Optional[Basket]:
        """Retourne le panier, ou None s'il est absent, expiré ou illisible."""
        raw = await self.redis.get(basket_key(basket_id))
        if not raw:
            return None
        try:
            return Basket.model_validate_json(raw)
        except ValidationError:
            logger.exception("baskets.repository.get corrupt basket id=%s", basket_id)
            return None

    async def put(self, basket: Basket) -> None:
        await self.redis.set(basket_key(basket.id), basket.model_dump_json(context=EXACT_MONEY), ex=self.ttl)

    async def delete(self, basket_id: str) -> bool:
        return bool(await self.redis.delete(basket_key(basket_id)))
