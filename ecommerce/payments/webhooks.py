"""
Webhooks Stripe (payment intents): vérification puis routage vers le suivi des commandes.
- payment_intent.succeeded       -> OrderStatusResolver.mark_succeeded
- payment_intent.payment_failed  -> OrderStatusResolver.mark_failed
- autres types                   -> ignorés
"""
import logging
from typing import Any, Dict, Mapping, Optional

from ecommerce.config import PaymentSettings
from ecommerce.orders.service import OrderStatusResolver
from ecommerce.payments.exceptions import AmbiguousOrder
from ecommerce.payments.ports import PaymentProvider

logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"

# module ecommerce.payments.webhooks
def intent_id_from_event(event: Mapping[str, Any]) -> Optional[str]:
    """Extrait data.object.id d'un event Stripe (objet stripe.Event ou dict)."""
    try:
        return event["data"]["object"]["id"]
    except (KeyError, TypeError):
        return None


class WebhookDispatcher:
    def __init__(self, *, settings: PaymentSettings, provider: PaymentProvider, resolver: OrderStatusResolver):
        self.settings = settings
        self.provider = provider
        self.resolver = resolver
        self._handlers = {
            PAYMENT_SUCCEEDED: resolver.mark_succeeded,
            PAYMENT_FAILED: resolver.mark_failed,
        }

    async def dispatch(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Vérifie puis traite un webhook Stripe.
        - Soulève VerificationError si la signature est invalide (aucune commande touchée).
        - Retourne {"status": "ok" | "not_found" | "ambiguous" | "ignored", ...}: une commande absente
          n'est pas une erreur (événements de test, intents sans commande), Stripe ne doit pas rejouer.
        """
        event = self.provider.construct_event(payload, signature, self.settings.webhook_secret)
        event_type = event["type"]
        handler = self._handlers.get(event_type)
        if handler is None:
            logger.debug("payments.webhook ignored type=%s", event_type)
            return {"status": "ignored", "type": event_type}

        intent_id = intent_id_from_event(event)
        if not intent_id:
            logger.warning("payments.webhook event without intent id type=%s", event_type)
            return {"status": "ignored", "type": event_type}

        logger.info("payments.webhook %s intent=%s", event_type, intent_id)
        try:
            order = await handler(intent_id)
        except AmbiguousOrder:
            logger.exception("payments.webhook ambiguous order lookup intent=%s", intent_id)
            return {"status": "ambiguous", "type": event_type, "intent_id": intent_id}
        if order is None:
            logger.info("payments.webhook no order for intent=%s type=%s", intent_id, event_type)
            return {"status": "not_found", "type": event_type, "intent_id": intent_id}

        logger.info("payments.webhook order=%s status=%s", order.id, order.status_value)
        return {"status": "ok", "type": event_type, "order_id": order.id, "order_status": order.status_value}
