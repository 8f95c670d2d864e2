"""
Accès aux données du catalogue (table 'products').
"""
import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

import ecommerce.infra.supabase_client as supabase_client
from ecommerce.catalog.models import Product

logger = logging.getLogger(__name__)

# module ecommerce.catalog.repository
def fetch_product_by_id(product_id: int) -> Optional[dict]:
    """
    Récupère une ligne 'products' par id (appel Supabase synchrone).
    - Retourne None si absente; les erreurs d'accès sont loguées puis propagées.
    """
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select("id, name, price")
            .eq("id", product_id)
            .limit(1)
            .execute()
        )
    except Exception:
        logger.exception("catalog.repository.fetch_product_by_id failed id=%s", product_id)
        raise
    rows = res.data or []
    return rows[0] if rows else None


class SupabaseCatalogRepository:
    async def get_by_id(self, product_id: int) -> Optional[Product]:
        row = await run_in_threadpool(fetch_product_by_id, product_id)
        return Product.from_row(row) if row else None
