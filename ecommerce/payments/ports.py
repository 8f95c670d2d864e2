"""
Ports (interfaces) consommés par les services de paiement.
- Les implémentations réelles: Redis (paniers), Supabase (catalogue, livraison,
  commandes), Stripe (payment intents, webhooks).
- Les tests injectent des fakes en mémoire respectant ces signatures.
"""
from typing import Any, List, Mapping, Optional, Protocol, Sequence

from pydantic import BaseModel

from ecommerce.baskets.models import Basket
from ecommerce.catalog.models import Product
from ecommerce.delivery.models import DeliveryMethod
from ecommerce.orders.models import Order


class IntentResult(BaseModel):
    """Réponse utile de Stripe à la création d'un payment intent."""
    id: str
    client_secret: str


class BasketStore(Protocol):
    async def get(self, basket_id: str) -> Optional[Basket]: ...

    async def put(self, basket: Basket) -> None: ...

    async def delete(self, basket_id: str) -> bool: ...


class CatalogRepository(Protocol):
    async def get_by_id(self, product_id: int) -> Optional[Product]: ...


class DeliveryMethodRepository(Protocol):
    async def get_by_id(self, delivery_method_id: int) -> Optional[DeliveryMethod]: ...

    async def list_all(self) -> List[DeliveryMethod]: ...


class OrderRepository(Protocol):
    async def find_by_intent_id(self, intent_id: str) -> Optional[Order]: ...

    async def save(self, order: Order) -> None: ...


class PaymentProvider(Protocol):
    async def create_intent(self, amount: int, currency: str, method_types: Sequence[str]) -> IntentResult: ...

    async def update_intent(self, intent_id: str, amount: int) -> None: ...

    def construct_event(self, payload: bytes, signature: Optional[str], secret: str) -> Mapping[str, Any]: ...
