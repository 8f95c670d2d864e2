# module ecommerce.orders.models
"""Modèle des commandes côté paiement.
- OrderStatus: valeurs persistées telles quelles dans la colonne 'status'.
- Order: seuls les champs utiles au suivi du paiement sont typés.
  Un statut hors OrderStatus (ex: 'Shipped', posé par la logistique) est conservé tel quel.
"""
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PAYMENT_PENDING = "PaymentPending"
    PAYMENT_RECEIVED = "PaymentReceived"
    PAYMENT_FAILED = "PaymentFailed"


# Statuts qu'un événement de paiement peut faire évoluer
PAYABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PAYMENT_PENDING, OrderStatus.PAYMENT_FAILED})


class Order(BaseModel):
    id: int
    buyer_email: Optional[str] = None
    status: Union[OrderStatus, str] = Field(default=OrderStatus.PENDING, union_mode="left_to_right")
    payment_intent_id: Optional[str] = None

    @property
    def status_value(self) -> str:
        return self.status.value if isinstance(self.status, OrderStatus) else self.status

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Order":
        return cls(
            id=int(row["id"]),
            buyer_email=row.get("buyer_email"),
            status=row.get("status") or OrderStatus.PENDING,
            payment_intent_id=row.get("payment_intent_id"),
        )
