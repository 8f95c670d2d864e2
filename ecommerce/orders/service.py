"""Couche service du suivi de paiement des commandes.
Rôles:
- Retrouver l'unique commande liée à un payment intent Stripe.
- Appliquer PaymentReceived (succès) ou PaymentFailed (échec) et persister.
Idempotence:
- Réappliquer le même statut ne déclenche aucune écriture.
- Avec monotonic_status, un échec tardif n'écrase jamais un paiement reçu.
- Un statut hors PAYABLE_STATUSES (ex: expédiée) n'est jamais modifié par un paiement.
"""
import logging
from typing import Optional

from ecommerce.config import PaymentSettings
from ecommerce.orders.models import PAYABLE_STATUSES, Order, OrderStatus
from ecommerce.payments.ports import OrderRepository

logger = logging.getLogger(__name__)


class OrderStatusResolver:
    def __init__(self, *, settings: PaymentSettings, orders: OrderRepository):
        self.settings = settings
        self.orders = orders

    def _is_regression(self, order: Order) -> bool:
        if order.status in PAYABLE_STATUSES:
            return False
        if order.status == OrderStatus.PAYMENT_RECEIVED:
            # seul cas réglable: échec tardif après succès
            return self.settings.monotonic_status
        return True

    async def _transition(self, intent_id: str, target: OrderStatus) -> Optional[Order]:
        order = await self.orders.find_by_intent_id(intent_id)
        if order is None:
            logger.info("orders.status no order for intent=%s target=%s", intent_id, target.value)
            return None
        if order.status == target:
            logger.info("orders.status already %s order=%s intent=%s", target.value, order.id, intent_id)
            return order
        if self._is_regression(order):
            logger.warning(
                "orders.status refused %s -> %s order=%s intent=%s",
                order.status_value, target.value, order.id, intent_id,
            )
            return order
        previous = order.status_value
        order.status = target
        await self.orders.save(order)
        logger.info("orders.status %s -> %s order=%s intent=%s", previous, target.value, order.id, intent_id)
        return order

    async def mark_succeeded(self, intent_id: str) -> Optional[Order]:
        """Paiement confirmé par Stripe: statut PaymentReceived. None si aucune commande."""
        return await self._transition(intent_id, OrderStatus.PAYMENT_RECEIVED)

    async def mark_failed(self, intent_id: str) -> Optional[Order]:
        """Paiement refusé par Stripe: statut PaymentFailed. None si aucune commande."""
        return await self._transition(intent_id, OrderStatus.PAYMENT_FAILED)
