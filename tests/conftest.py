"""Pytest configuration and fixtures"""
import os
from decimal import Decimal

import pytest

os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("API_BASE_URL", "http://catalog.test")

from core.cart import CartManager
from core.errors import RemoteServiceFailure
from core.models import ProductInfo, StockInfo
from core.notifications import Notifier
from core.provider import CartProvider
from core.storage import SQLiteStorage


class FakeShop:
    """In-process stand-in for the catalog and stock services."""

    def __init__(self):
        self.products = {}
        self.stock = {}
        self.product_calls = []
        self.stock_calls = []

    def add(self, product_id, title, image, price, available):
        self.products[product_id] = ProductInfo(
            product_id=product_id,
            title=title,
            image=image,
            unit_price=Decimal(str(price)),
        )
        self.stock[product_id] = available

    def get_product(self, product_id):
        self.product_calls.append(product_id)
        if product_id not in self.products:
            raise RemoteServiceFailure("catalog", product_id, "HTTP 404")
        return self.products[product_id]

    def get_stock(self, product_id):
        self.stock_calls.append(product_id)
        if product_id not in self.stock:
            raise RemoteServiceFailure("stock", product_id, "HTTP 404")
        return StockInfo(product_id=product_id, available_amount=self.stock[product_id])


class FailingStorage:
    """Storage whose reads delegate and whose writes always fail."""

    def __init__(self, inner):
        self.inner = inner

    def read(self, key):
        return self.inner.read(key)

    def write(self, key, value):
        raise OSError("disk full")


@pytest.fixture
def shop():
    fake = FakeShop()
    fake.add(42, "Shoe", "shoe.png", 100, available=5)
    fake.add(7, "Sneaker", "sneaker.png", "179.90", available=10)
    fake.add(9, "Boot", "boot.png", "249.99", available=0)
    return fake


@pytest.fixture
def storage(tmp_path):
    return SQLiteStorage(str(tmp_path / "cart.sqlite3"))


@pytest.fixture
def make_manager(storage, shop):
    def _make(store=None):
        return CartManager(
            store or storage,
            get_product=shop.get_product,
            get_stock=shop.get_stock,
        )
    return _make


@pytest.fixture
def manager(make_manager):
    return make_manager()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def provider(manager, notifier):
    return CartProvider(manager, notifier)
