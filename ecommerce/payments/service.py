"""
Cas d'usage 'payments': crée ou met à jour le payment intent Stripe d'un panier.
Orchestre stockage panier, catalogue, méthodes de livraison, calcul de prix et Stripe.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import LockError

from ecommerce.baskets.models import Basket
from ecommerce.config import PaymentSettings
from ecommerce.delivery.models import DeliveryMethod
from ecommerce.payments import pricing
from ecommerce.payments.exceptions import BasketBusy, DeliveryMethodNotFound
from ecommerce.payments.ports import (
    BasketStore,
    CatalogRepository,
    DeliveryMethodRepository,
    PaymentProvider,
)

logger = logging.getLogger(__name__)

LOCK_KEY_PREFIX = "basket-lock:"

# module ecommerce.payments.service
class BasketLocks:
    """
    Exclusion mutuelle par identifiant de panier.
    - Dans le processus: un asyncio.Lock par panier, retiré du registre dès qu'inutilisé.
    - Entre workers (si redis est fourni): verrou Redis 'basket-lock:<id>' avec expiration,
      pris après le verrou local. Attente bornée par wait_seconds, sinon BasketBusy.
    Deux synchronisations du même panier ne s'entrelacent jamais entre lecture et écriture.
    """

    def __init__(self, redis: Optional[Redis] = None, *, timeout_seconds: float = 30.0, wait_seconds: float = 10.0):
        self.redis = redis
        self.timeout_seconds = timeout_seconds
        self.wait_seconds = wait_seconds
        self._locks: Dict[str, asyncio.Lock] = {}
        self._holders: Dict[str, int] = {}

    @asynccontextmanager
    async def _shared(self, basket_id: str):
        if self.redis is None:
            yield
            return
        lock = self.redis.lock(
            f"{LOCK_KEY_PREFIX}{basket_id}",
            timeout=self.timeout_seconds,
            blocking_timeout=self.wait_seconds,
        )
        if not await lock.acquire():
            logger.warning("payments.locks basket=%s busy after %ss", basket_id, self.wait_seconds)
            raise BasketBusy(basket_id)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                logger.warning("payments.locks basket=%s lock expired before release", basket_id)

    @asynccontextmanager
    async def hold(self, basket_id: str):
        lock = self._locks.setdefault(basket_id, asyncio.Lock())
        self._holders[basket_id] = self._holders.get(basket_id, 0) + 1
        try:
            async with lock:
                async with self._shared(basket_id):
                    yield
        finally:
            self._holders[basket_id] -= 1
            if not self._holders[basket_id]:
                del self._holders[basket_id]
                del self._locks[basket_id]

    def __len__(self) -> int:
        return len(self._locks)


class IntentSynchronizer:
    def __init__(
        self,
        *,
        settings: PaymentSettings,
        baskets: BasketStore,
        catalog: CatalogRepository,
        delivery_methods: DeliveryMethodRepository,
        provider: PaymentProvider,
        locks: Optional[BasketLocks] = None,
    ):
        self.settings = settings
        self.baskets = baskets
        self.catalog = catalog
        self.delivery_methods = delivery_methods
        self.provider = provider
        self.locks = locks if locks is not None else BasketLocks()

    async def _resolve_delivery_method(self, basket: Basket) -> Optional[DeliveryMethod]:
        if basket.delivery_method_id is None:
            return None
        method = await self.delivery_methods.get_by_id(basket.delivery_method_id)
        if method is None:
            raise DeliveryMethodNotFound(basket.delivery_method_id)
        return method

    async def synchronize(self, basket_id: str) -> Optional[Basket]:
        """
        Crée ou met à jour le payment intent du panier.
        Étapes:
          1) Lire le panier (None si absent)
          2) Réaligner les prix sur le catalogue
          3) Résoudre la méthode de livraison
          4) Calculer le total en centimes
          5) Stripe: création (pas encore d'intent) ou mise à jour du montant
          6) Persister le panier
        Erreurs: ProductNotFound, DeliveryMethodNotFound, ProviderError, BasketBusy propagées;
        le panier n'est alors pas persisté.
        """
        async with self.locks.hold(basket_id):
            basket = await self.baskets.get(basket_id)
            if basket is None:
                logger.info("payments.synchronize basket not found id=%s", basket_id)
                return None

            await pricing.reconcile_prices(basket, self.catalog)
            delivery_method = await self._resolve_delivery_method(basket)
            amount = pricing.compute_total(basket, delivery_method)
            basket.shipping_price = delivery_method.price if delivery_method else Decimal("0")

            if not basket.has_payment_intent:
                intent = await self.provider.create_intent(
                    amount, self.settings.currency, self.settings.payment_method_types
                )
                basket.payment_intent_id = intent.id
                basket.client_secret = intent.client_secret
                logger.info("payments.synchronize intent created basket=%s intent=%s amount=%s", basket_id, intent.id, amount)
            else:
                await self.provider.update_intent(basket.payment_intent_id, amount)
                logger.info(
                    "payments.synchronize intent updated basket=%s intent=%s amount=%s",
                    basket_id, basket.payment_intent_id, amount,
                )

            await self.baskets.put(basket)
            return basket
