from typing import List

from fastapi import APIRouter, Depends

from ecommerce.delivery.models import DeliveryMethod
from ecommerce.payments.dependencies import get_delivery_methods
from ecommerce.payments.ports import DeliveryMethodRepository

router = APIRouter(prefix="/api/v1/delivery-methods", tags=["Delivery API"])

# module ecommerce.delivery.views
@router.get("", response_model=List[DeliveryMethod])
async def list_delivery_methods(repo: DeliveryMethodRepository = Depends(get_delivery_methods)):
    """Méthodes de livraison proposées au checkout (le client choisit delivery_method_id)."""
    return await repo.list_all()
