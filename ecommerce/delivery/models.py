# module ecommerce.delivery.models
from decimal import Decimal
from typing import Any, Dict

from pydantic import BaseModel

from ecommerce.utils.money import Money


class DeliveryMethod(BaseModel):
    """Méthode de livraison (donnée de référence, lecture seule)."""
    id: int
    short_name: str = ""
    delivery_time: str = ""
    description: str = ""
    price: Money

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "DeliveryMethod":
        return cls(
            id=int(row["id"]),
            short_name=str(row.get("short_name") or ""),
            delivery_time=str(row.get("delivery_time") or ""),
            description=str(row.get("description") or ""),
            price=Decimal(str(row.get("price") or 0)),
        )
