"""
Câblage FastAPI (Depends) des services de paiement.
- Chaque port a son provider: les tests les remplacent via app.dependency_overrides.
- PaymentSettings est construit une fois puis injecté; les services ne lisent pas la config globale.
- Redis et le registre de verrous vivent dans app.state (créés par le lifespan).
"""
from functools import lru_cache

from fastapi import Depends, Request

from ecommerce.baskets.repository import RedisBasketStore
from ecommerce.catalog.repository import SupabaseCatalogRepository
from ecommerce.config import PaymentSettings, get_payment_settings
from ecommerce.delivery.repository import SupabaseDeliveryMethodRepository
from ecommerce.orders.repository import SupabaseOrderRepository
from ecommerce.orders.service import OrderStatusResolver
from ecommerce.payments.ports import (
    BasketStore,
    CatalogRepository,
    DeliveryMethodRepository,
    OrderRepository,
    PaymentProvider,
)
from ecommerce.payments.service import IntentSynchronizer
from ecommerce.payments.stripe_client import StripeProvider
from ecommerce.payments.webhooks import WebhookDispatcher

# module ecommerce.payments.dependencies
@lru_cache
def get_settings() -> PaymentSettings:
    return get_payment_settings()

def get_basket_store(request: Request, settings: PaymentSettings = Depends(get_settings)) -> BasketStore:
    return RedisBasketStore(request.app.state.redis, ttl_days=settings.basket_ttl_days)

def get_catalog() -> CatalogRepository:
    return SupabaseCatalogRepository()

def get_delivery_methods() -> DeliveryMethodRepository:
    return SupabaseDeliveryMethodRepository()

def get_order_repository() -> OrderRepository:
    return SupabaseOrderRepository()

def get_provider(settings: PaymentSettings = Depends(get_settings)) -> PaymentProvider:
    return StripeProvider(settings)

def get_intent_synchronizer(
    request: Request,
    settings: PaymentSettings = Depends(get_settings),
    baskets: BasketStore = Depends(get_basket_store),
    catalog: CatalogRepository = Depends(get_catalog),
    delivery_methods: DeliveryMethodRepository = Depends(get_delivery_methods),
    provider: PaymentProvider = Depends(get_provider),
) -> IntentSynchronizer:
    return IntentSynchronizer(
        settings=settings,
        baskets=baskets,
        catalog=catalog,
        delivery_methods=delivery_methods,
        provider=provider,
        locks=request.app.state.basket_locks,
    )

def get_order_resolver(
    settings: PaymentSettings = Depends(get_settings),
    orders: OrderRepository = Depends(get_order_repository),
) -> OrderStatusResolver:
    return OrderStatusResolver(settings=settings, orders=orders)

def get_webhook_dispatcher(
    settings: PaymentSettings = Depends(get_settings),
    provider: PaymentProvider = Depends(get_provider),
    resolver: OrderStatusResolver = Depends(get_order_resolver),
) -> WebhookDispatcher:
    return WebhookDispatcher(settings=settings, provider=provider, resolver=resolver)
