# module ecommerce.catalog.models
from decimal import Decimal
from typing import Any, Dict

from pydantic import BaseModel

from ecommerce.utils.money import Money


class Product(BaseModel):
    """Produit du catalogue: seule source de vérité pour le prix."""
    id: int
    name: str = ""
    price: Money

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Product":
        # Supabase renvoie les numeric en float ou str: passer par str évite les artefacts binaires
        return cls(id=int(row["id"]), name=str(row.get("name") or ""), price=Decimal(str(row.get("price") or 0)))
