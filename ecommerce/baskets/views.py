# module ecommerce.baskets.views
"""Endpoints panier (stockage Redis).
- GET /{basket_id}: panier courant, ou panier vide s'il n'existe pas encore.
- POST: enregistre le panier tel qu'envoyé par le client (les prix seront réalignés au paiement).
- DELETE /{basket_id}: supprime le panier (ex: après commande).
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ecommerce.baskets.models import Basket
from ecommerce.payments.dependencies import get_basket_store
from ecommerce.payments.ports import BasketStore

router = APIRouter(prefix="/api/v1/baskets", tags=["Baskets API"])


@router.get("/{basket_id}", response_model=Basket)
async def get_basket(basket_id: str, store: BasketStore = Depends(get_basket_store)):
    return await store.get(basket_id) or Basket(id=basket_id)


@router.post("", response_model=Basket)
async def update_basket(basket: Basket, store: BasketStore = Depends(get_basket_store)):
    await store.put(basket)
    return basket


@router.delete("/{basket_id}", status_code=204)
async def delete_basket(basket_id: str, store: BasketStore = Depends(get_basket_store)):
    await store.delete(basket_id)
    return Response(status_code=204)
