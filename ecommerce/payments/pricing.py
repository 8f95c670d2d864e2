"""
Logique de prix du panier (pas de Stripe, pas de stockage du panier).
- reconcile_prices: réaligne les prix des lignes sur le catalogue.
- compute_total: montant à encaisser en unités mineures (centimes), arithmétique entière.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ecommerce.baskets.models import Basket
from ecommerce.delivery.models import DeliveryMethod
from ecommerce.payments.exceptions import ProductNotFound
from ecommerce.payments.ports import CatalogRepository

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# module ecommerce.payments.pricing
def to_minor_units(amount: Decimal) -> int:
    """
    Convertit un montant décimal (2 décimales) en centimes.
    - Decimal uniquement: jamais de float pour l'argent.
    - Arrondi commercial (ROUND_HALF_UP) si plus de 2 décimales.
    """
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


async def reconcile_prices(basket: Basket, catalog: CatalogRepository) -> Basket:
    """
    Écrase le prix de chaque ligne par le prix du catalogue (source de vérité).
    - Soulève ProductNotFound si un produit n'existe plus (ne jamais facturer un produit absent).
    - Modifie le panier en place, ne persiste rien.
    - Idempotent: relancé sans changement de catalogue, ne modifie rien.
    """
    for item in basket.items:
        product = await catalog.get_by_id(item.id)
        if product is None:
            raise ProductNotFound(item.id)
        authoritative = product.price.quantize(CENT, rounding=ROUND_HALF_UP)
        if item.price != authoritative:
            logger.info(
                "payments.pricing price corrected basket=%s product=%s %s -> %s",
                basket.id, item.id, item.price, authoritative,
            )
            item.price = authoritative
    return basket


def compute_total(basket: Basket, delivery_method: Optional[DeliveryMethod] = None) -> int:
    """
    Total = sous-total (quantité x prix en centimes) + livraison en centimes.
    - La livraison n'est comptée que si le panier porte un delivery_method_id.
    - Panier vide: total = livraison seule.
    """
    subtotal = sum(item.quantity * to_minor_units(item.price) for item in basket.items)
    shipping = 0
    if basket.delivery_method_id is not None and delivery_method is not None:
        shipping = to_minor_units(delivery_method.price)
    return subtotal + shipping
