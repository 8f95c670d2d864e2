import logging
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

import ecommerce.infra.supabase_client as supabase_client
from ecommerce.delivery.models import DeliveryMethod

logger = logging.getLogger(__name__)

# module ecommerce.delivery.repository
def fetch_delivery_method(delivery_method_id: int) -> Optional[dict]:
    """Ligne 'delivery_methods' par id, ou None."""
    try:
        res = (
            supabase_client.get_supabase()
            .table("delivery_methods")
            .select("*")
            .eq("id", delivery_method_id)
            .limit(1)
            .execute()
        )
    except Exception:
        logger.exception("delivery.repository.fetch_delivery_method failed id=%s", delivery_method_id)
        raise
    rows = res.data or []
    return rows[0] if rows else None

def fetch_delivery_methods() -> List[dict]:
    """Toutes les méthodes de livraison, triées par prix."""
    try:
        res = supabase_client.get_supabase().table("delivery_methods").select("*").order("price").execute()
    except Exception:
        logger.exception("delivery.repository.fetch_delivery_methods failed")
        raise
    return res.data or []


class SupabaseDeliveryMethodRepository:
    async def get_by_id(self, delivery_method_id: int) -> Optional[DeliveryMethod]:
        row = await run_in_threadpool(fetch_delivery_method, delivery_method_id)
        return DeliveryMethod.from_row(row) if row else None

    async def list_all(self) -> List[DeliveryMethod]:
        rows = await run_in_threadpool(fetch_delivery_methods)
        return [DeliveryMethod.from_row(r) for r in rows]
