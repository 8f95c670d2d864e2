"""
Accès aux données des commandes (table 'orders') pour le suivi du paiement.
Écritures via le client service-role: le webhook Stripe n'a pas d'utilisateur.
"""
import logging
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

import ecommerce.infra.supabase_client as supabase_client
from ecommerce.orders.models import Order
from ecommerce.payments.exceptions import AmbiguousOrder

logger = logging.getLogger(__name__)

# module ecommerce.orders.repository
def fetch_orders_by_intent_id(intent_id: str) -> List[dict]:
    """
    Commandes liées au payment intent donné.
    - limit(2): suffit pour détecter une association non unique.
    """
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select("id, buyer_email, status, payment_intent_id")
            .eq("payment_intent_id", intent_id)
            .limit(2)
            .execute()
        )
    except Exception:
        logger.exception("orders.repository.fetch_orders_by_intent_id failed intent=%s", intent_id)
        raise
    return res.data or []

def update_order_status(order_id: int, status: str) -> None:
    try:
        (
            supabase_client.get_service_supabase()
            .table("orders")
            .update({"status": status})
            .eq("id", order_id)
            .execute()
        )
    except Exception:
        logger.exception("orders.repository.update_order_status failed id=%s status=%s", order_id, status)
        raise


class SupabaseOrderRepository:
    async def find_by_intent_id(self, intent_id: str) -> Optional[Order]:
        rows = await run_in_threadpool(fetch_orders_by_intent_id, intent_id)
        if len(rows) > 1:
            raise AmbiguousOrder(intent_id, len(rows))
        return Order.from_row(rows[0]) if rows else None

    async def save(self, order: Order) -> None:
        await run_in_threadpool(update_order_status, order.id, order.status_value)
