"""
Module 'payments' (feature-first): point d'entrée public.
Réunit le calcul de prix, les ports (interfaces des collaborateurs) et les erreurs métier.
Les services (service, webhooks) et l'adaptateur Stripe s'importent depuis leurs modules.
"""

from .exceptions import (
    PaymentsError,
    NotFound,
    ProductNotFound,
    DeliveryMethodNotFound,
    AmbiguousOrder,
    ProviderError,
    VerificationError,
    BasketBusy,
)
from .ports import (
    IntentResult,
    BasketStore,
    CatalogRepository,
    DeliveryMethodRepository,
    OrderRepository,
    PaymentProvider,
)
from .pricing import to_minor_units, reconcile_prices, compute_total

__all__ = [
    # exceptions
    "PaymentsError",
    "NotFound",
    "ProductNotFound",
    "DeliveryMethodNotFound",
    "AmbiguousOrder",
    "ProviderError",
    "VerificationError",
    "BasketBusy",
    # ports
    "IntentResult",
    "BasketStore",
    "CatalogRepository",
    "DeliveryMethodRepository",
    "OrderRepository",
    "PaymentProvider",
    # pricing
    "to_minor_units",
    "reconcile_prices",
    "compute_total",
]
