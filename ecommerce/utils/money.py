# module ecommerce.utils.money
"""
Type monétaire commun aux modèles (panier, catalogue, livraison).
- Decimal >= 0: un prix négatif est refusé dès la validation.
- JSON client: nombre (10.5).
- JSON de stockage (context={"exact_money": True}): chaîne exacte ("10.50").
"""
from decimal import Decimal
from typing import Annotated, Union

from pydantic import Field, PlainSerializer, SerializationInfo

EXACT_MONEY = {"exact_money": True}


def _money_json(value: Decimal, info: SerializationInfo) -> Union[str, float]:
    if (info.context or {}).get("exact_money"):
        return str(value)
    return float(value)


Money = Annotated[Decimal, Field(ge=0), PlainSerializer(_money_json, when_used="json")]
