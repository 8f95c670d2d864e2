import asyncio
import json
import os
from decimal import Decimal
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

# Avant tout import de l'app: Redis factice, pas de rate limiting
os.environ.setdefault("USE_FAKE_REDIS_FOR_TESTS", "1")
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from ecommerce.app import app as fastapi_app
from ecommerce.baskets.models import Basket, BasketItem
from ecommerce.catalog.models import Product
from ecommerce.config import PaymentSettings
from ecommerce.delivery.models import DeliveryMethod
from ecommerce.orders.models import Order, OrderStatus
from ecommerce.orders.service import OrderStatusResolver
from ecommerce.payments import dependencies as deps
from ecommerce.payments.exceptions import AmbiguousOrder, ProviderError, VerificationError
from ecommerce.payments.ports import IntentResult
from ecommerce.payments.service import IntentSynchronizer
from ecommerce.payments.webhooks import WebhookDispatcher
from ecommerce.utils.security import require_user
from ecommerce.utils.money import EXACT_MONEY

VALID_SIGNATURE = "test-signature"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


# --- Fakes en mémoire des ports (mêmes signatures que les implémentations réelles) ---

class InMemoryBasketStore:
    def __init__(self):
        self.data: Dict[str, str] = {}
        self.puts = 0

    async def get(self, basket_id: str) -> Optional[Basket]:
        raw = self.data.get(basket_id)
        return Basket.model_validate_json(raw) if raw else None

    async def put(self, basket: Basket) -> None:
        self.puts += 1
        self.data[basket.id] = basket.model_dump_json(context=EXACT_MONEY)

    async def delete(self, basket_id: str) -> bool:
        return self.data.pop(basket_id, None) is not None

    def add(self, basket: Basket) -> Basket:
        self.data[basket.id] = basket.model_dump_json(context=EXACT_MONEY)
        return basket


class InMemoryCatalog:
    def __init__(self):
        self.products: Dict[int, Product] = {}

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        return self.products.get(product_id)

    def add(self, product_id: int, price: str, name: str = "") -> Product:
        self.products[product_id] = Product(id=product_id, name=name or f"produit-{product_id}", price=Decimal(price))
        return self.products[product_id]


class InMemoryDeliveryMethods:
    def __init__(self):
        self.methods: Dict[int, DeliveryMethod] = {}

    async def get_by_id(self, delivery_method_id: int) -> Optional[DeliveryMethod]:
        return self.methods.get(delivery_method_id)

    async def list_all(self) -> List[DeliveryMethod]:
        return sorted(self.methods.values(), key=lambda m: m.price)

    def add(self, method_id: int, price: str) -> DeliveryMethod:
        self.methods[method_id] = DeliveryMethod(id=method_id, short_name=f"livraison-{method_id}", price=Decimal(price))
        return self.methods[method_id]


class InMemoryOrders:
    def __init__(self):
        self.orders: Dict[int, Order] = {}
        self.saves: List[Order] = []

    async def find_by_intent_id(self, intent_id: str) -> Optional[Order]:
        matches = [o for o in self.orders.values() if o.payment_intent_id == intent_id]
        if len(matches) > 1:
            raise AmbiguousOrder(intent_id, len(matches))
        return matches[0].model_copy() if matches else None

    async def save(self, order: Order) -> None:
        self.saves.append(order.model_copy())
        self.orders[order.id] = order.model_copy()

    def add(self, order_id: int, intent_id: str, status: OrderStatus = OrderStatus.PENDING) -> Order:
        self.orders[order_id] = Order(id=order_id, status=status, payment_intent_id=intent_id)
        return self.orders[order_id]


class FakeProvider:
    """Stripe simulé: enregistre les appels, signature valide = 'test-signature'."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.should_fail = False
        self._seq = 0

    def calls_to(self, method: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method]

    async def create_intent(self, amount, currency, method_types) -> IntentResult:
        self.calls.append({"method": "create_intent", "amount": amount, "currency": currency, "method_types": list(method_types)})
        await asyncio.sleep(0)
        if self.should_fail:
            raise ProviderError("Stripe create_intent: card_declined")
        self._seq += 1
        return IntentResult(id=f"pi_fake_{self._seq}", client_secret=f"pi_fake_{self._seq}_secret_abc")

    async def update_intent(self, intent_id, amount) -> None:
        self.calls.append({"method": "update_intent", "intent_id": intent_id, "amount": amount})
        await asyncio.sleep(0)
        if self.should_fail:
            raise ProviderError("Stripe update_intent: network error")

    def construct_event(self, payload, signature, secret):
        if not secret or signature != VALID_SIGNATURE:
            raise VerificationError("Signature Stripe invalide")
        return json.loads(payload)


def make_basket(basket_id: str = "b1", items=None, delivery_method_id=None, payment_intent_id=None, client_secret=None) -> Basket:
    return Basket(
        id=basket_id,
        items=[BasketItem(id=pid, product_name=f"produit-{pid}", price=Decimal(price), quantity=qty) for pid, price, qty in (items or [])],
        delivery_method_id=delivery_method_id,
        payment_intent_id=payment_intent_id,
        client_secret=client_secret,
    )

def stripe_event(event_type: str, intent_id: str) -> bytes:
    return json.dumps({"id": "evt_test", "type": event_type, "data": {"object": {"id": intent_id, "object": "payment_intent"}}}).encode()


# --- Fixtures ---

@pytest.fixture()
def settings() -> PaymentSettings:
    return PaymentSettings(secret_key="sk_test_123", publishable_key="pk_test_123", webhook_secret="whsec_test", currency="usd")

@pytest.fixture()
def baskets() -> InMemoryBasketStore:
    return InMemoryBasketStore()

@pytest.fixture()
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog()

@pytest.fixture()
def delivery_methods() -> InMemoryDeliveryMethods:
    return InMemoryDeliveryMethods()

@pytest.fixture()
def orders() -> InMemoryOrders:
    return InMemoryOrders()

@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()

@pytest.fixture()
def synchronizer(settings, baskets, catalog, delivery_methods, provider) -> IntentSynchronizer:
    return IntentSynchronizer(
        settings=settings, baskets=baskets, catalog=catalog, delivery_methods=delivery_methods, provider=provider
    )

@pytest.fixture()
def resolver(settings, orders) -> OrderStatusResolver:
    return OrderStatusResolver(settings=settings, orders=orders)

@pytest.fixture()
def dispatcher(settings, provider, resolver) -> WebhookDispatcher:
    return WebhookDispatcher(settings=settings, provider=provider, resolver=resolver)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app, settings, baskets, catalog, delivery_methods, orders, provider) -> Generator[TestClient, None, None]:
    """Client HTTP dont tous les ports sont remplacés par les fakes en mémoire."""
    app.dependency_overrides[deps.get_settings] = lambda: settings
    app.dependency_overrides[deps.get_basket_store] = lambda: baskets
    app.dependency_overrides[deps.get_catalog] = lambda: catalog
    app.dependency_overrides[deps.get_delivery_methods] = lambda: delivery_methods
    app.dependency_overrides[deps.get_order_repository] = lambda: orders
    app.dependency_overrides[deps.get_provider] = lambda: provider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

# Simuler un utilisateur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_require_user(app):
    fake_user: Dict[str, Any] = {
        "id": "test-user",
        "email": "test@example.com",
        "metadata": {"full_name": "Test User"},
    }
    app.dependency_overrides[require_user] = lambda: fake_user
    try:
        yield
    finally:
        app.dependency_overrides.pop(require_user, None)

@pytest.fixture()
def basket_factory():
    return make_basket

@pytest.fixture()
def event_factory():
    return stripe_event
