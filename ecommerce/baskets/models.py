# module ecommerce.baskets.models
"""Modèle du panier client (stocké en JSON dans Redis).
- BasketItem: une ligne (produit, prix unitaire enregistré, quantité).
- Basket: lignes + méthode de livraison + identifiants du payment intent Stripe.
Les affectations sont revalidées: un prix réaligné négatif est refusé.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ecommerce.utils.money import Money


class BasketItem(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(description="Identifiant du produit")
    product_name: str = ""
    price: Money
    quantity: int = Field(gt=0)
    picture_url: Optional[str] = None
    brand: Optional[str] = None
    type: Optional[str] = None


class Basket(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str
    items: List[BasketItem] = Field(default_factory=list)
    delivery_method_id: Optional[int] = None
    payment_intent_id: Optional[str] = None
    client_secret: Optional[str] = None
    shipping_price: Money = Decimal("0")

    @property
    def has_payment_intent(self) -> bool:
        return bool(self.payment_intent_id)
