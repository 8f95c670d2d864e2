import asyncio
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

import ecommerce.catalog.repository as catalog_repo
import ecommerce.delivery.repository as delivery_repo
import ecommerce.orders.repository as orders_repo
from ecommerce.catalog.models import Product
from ecommerce.delivery.models import DeliveryMethod
from ecommerce.orders.models import Order, OrderStatus
from ecommerce.payments.exceptions import AmbiguousOrder


class _Resp:
    def __init__(self, data=None):
        self.data = data


def _mk_client(data):
    """Client Supabase simulé: toute chaîne table().select().eq()... finit sur execute() -> data."""
    client = MagicMock()
    query = MagicMock()
    client.table.return_value = query
    for name in ("select", "eq", "limit", "order", "update"):
        getattr(query, name).return_value = query
    query.execute.return_value = _Resp(data)
    return client, query


def test_catalog_get_by_id_parses_decimal(monkeypatch):
    client, query = _mk_client([{"id": 1, "name": "Maillot", "price": 10.1}])
    monkeypatch.setattr("ecommerce.infra.supabase_client.get_supabase", lambda: client)

    product = asyncio.run(catalog_repo.SupabaseCatalogRepository().get_by_id(1))

    assert product.price == Decimal("10.1")
    client.table.assert_called_with("products")
    query.eq.assert_called_with("id", 1)


def test_catalog_get_by_id_absent(monkeypatch):
    client, _ = _mk_client([])
    monkeypatch.setattr("ecommerce.infra.supabase_client.get_supabase", lambda: client)

    assert asyncio.run(catalog_repo.SupabaseCatalogRepository().get_by_id(404)) is None


def test_catalog_errors_propagate(monkeypatch):
    def boom():
        raise RuntimeError("supabase down")

    monkeypatch.setattr("ecommerce.infra.supabase_client.get_supabase", boom)

    with pytest.raises(RuntimeError):
        asyncio.run(catalog_repo.SupabaseCatalogRepository().get_by_id(1))


def test_delivery_methods(monkeypatch):
    client, query = _mk_client([{"id": 1, "short_name": "UPS1", "price": "5.00"}, {"id": 2, "short_name": "UPS2", "price": "10"}])
    monkeypatch.setattr("ecommerce.infra.supabase_client.get_supabase", lambda: client)
    repo = delivery_repo.SupabaseDeliveryMethodRepository()

    methods = asyncio.run(repo.list_all())
    single = asyncio.run(repo.get_by_id(1))

    assert [m.price for m in methods] == [Decimal("5.00"), Decimal("10")]
    assert single.short_name == "UPS1"
    query.order.assert_called_with("price")


def test_orders_find_single(monkeypatch):
    client, query = _mk_client([{"id": 9, "status": "Pending", "payment_intent_id": "pi_1", "buyer_email": "a@b.c"}])
    monkeypatch.setattr("ecommerce.infra.supabase_client.get_service_supabase", lambda: client)

    order = asyncio.run(orders_repo.SupabaseOrderRepository().find_by_intent_id("pi_1"))

    assert order.id == 9
    assert order.status == OrderStatus.PENDING
    query.eq.assert_called_with("payment_intent_id", "pi_1")


def test_orders_find_none(monkeypatch):
    client, _ = _mk_client([])
    monkeypatch.setattr("ecommerce.infra.supabase_client.get_service_supabase", lambda: client)

    assert asyncio.run(orders_repo.SupabaseOrderRepository().find_by_intent_id("pi_x")) is None


def test_orders_find_ambiguous(monkeypatch):
    client, _ = _mk_client([{"id": 1, "payment_intent_id": "pi_1"}, {"id": 2, "payment_intent_id": "pi_1"}])
    monkeypatch.setattr("ecommerce.infra.supabase_client.get_service_supabase", lambda: client)

    with pytest.raises(AmbiguousOrder):
        asyncio.run(orders_repo.SupabaseOrderRepository().find_by_intent_id("pi_1"))


def test_orders_save_updates_status(monkeypatch):
    client, query = _mk_client([])
    monkeypatch.setattr("ecommerce.infra.supabase_client.get_service_supabase", lambda: client)

    asyncio.run(orders_repo.SupabaseOrderRepository().save(Order(id=9, status=OrderStatus.PAYMENT_RECEIVED)))

    query.update.assert_called_once_with({"status": "PaymentReceived"})
    query.eq.assert_called_with("id", 9)


def test_orders_find_parses_payment_pending(monkeypatch):
    client, _ = _mk_client([{"id": 3, "status": "PaymentPending", "payment_intent_id": "pi_p"}])
    monkeypatch.setattr("ecommerce.infra.supabase_client.get_service_supabase", lambda: client)

    order = asyncio.run(orders_repo.SupabaseOrderRepository().find_by_intent_id("pi_p"))

    assert order.status is OrderStatus.PAYMENT_PENDING


def test_orders_find_keeps_unknown_status(monkeypatch):
    client, _ = _mk_client([{"id": 4, "status": "Shipped", "payment_intent_id": "pi_s"}])
    monkeypatch.setattr("ecommerce.infra.supabase_client.get_service_supabase", lambda: client)

    order = asyncio.run(orders_repo.SupabaseOrderRepository().find_by_intent_id("pi_s"))

    assert order.status == "Shipped"
    assert order.status_value == "Shipped"


def test_negative_prices_from_supabase_are_rejected():
    with pytest.raises(ValidationError):
        Product.from_row({"id": 1, "name": "x", "price": "-10.00"})
    with pytest.raises(ValidationError):
        DeliveryMethod.from_row({"id": 1, "price": -5})
