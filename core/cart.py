# core/cart.py
import json
import os
import threading
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from .errors import InsufficientStock, ProductNotInCart, StorageFailure
from .logger import get_logger
from .models import CartItem, ProductInfo, StockInfo
from .storage import KeyValueStorage

import services

logger = get_logger(__name__)

CART_STORAGE_KEY = os.getenv("CART_STORAGE_KEY", "@RocketShoes:cart")

ProductLookup = Callable[[int], ProductInfo]
StockLookup = Callable[[int], StockInfo]


def _decimal_default(value):
    if isinstance(value, Decimal):
        # Whole prices stay ints ("price": 100); fractional ones are
        # written as strings so no precision is lost through float
        if value == value.to_integral_value():
            return int(value)
        return str(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def serialize_cart(items: List[CartItem]) -> str:
    return json.dumps([it.to_snapshot() for it in items], default=_decimal_default)


def deserialize_cart(raw: str) -> List[CartItem]:
    """
    Parse a stored snapshot. Raises ValueError if the payload is not a JSON
    list; malformed or duplicate entries are skipped.
    """
    data = json.loads(raw, parse_float=Decimal)
    if not isinstance(data, list):
        raise ValueError("cart snapshot is not a list")

    items: List[CartItem] = []
    seen = set()
    for entry in data:
        try:
            item = CartItem.from_snapshot(entry)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Dropping malformed cart entry %r: %s", entry, e)
            continue
        if item.product_id in seen:
            logger.warning("Dropping duplicate cart entry for product %d", item.product_id)
            continue
        seen.add(item.product_id)
        items.append(item)
    return items


class CartManager:
    """
    Owns the cart, validates every mutation against remote stock and keeps
    the durable snapshot in sync.

    Memory and storage change together or not at all: the new cart is built
    as a fresh list, written to storage, and only then swapped in.
    Mutations on one instance are serialized by a lock.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        get_product: Optional[ProductLookup] = None,
        get_stock: Optional[StockLookup] = None,
        storage_key: str = CART_STORAGE_KEY,
    ):
        get_product = get_product or services.fetch_product
        get_stock = get_stock or services.fetch_stock

        self._storage = storage
        self._get_product = get_product
        self._get_stock = get_stock
        self._key = storage_key
        self._lock = threading.Lock()
        self._items: List[CartItem] = self._load()

    def _load(self) -> List[CartItem]:
        raw = self._storage.read(self._key)
        if raw is None:
            logger.debug("No stored cart under %s; starting empty.", self._key)
            return []
        try:
            items = deserialize_cart(raw)
        except ValueError as e:
            logger.error("Stored cart under %s is unreadable (%s); starting empty.", self._key, e)
            return []
        logger.info("Loaded cart with %d items from %s", len(items), self._key)
        return items

    @property
    def cart(self) -> Tuple[CartItem, ...]:
        return tuple(self._items)

    @property
    def total(self) -> Decimal:
        return sum((it.subtotal for it in self._items), Decimal("0"))

    def find(self, product_id: int) -> Optional[CartItem]:
        for it in self._items:
            if it.product_id == product_id:
                return it
        return None

    def _commit(self, items: List[CartItem]) -> None:
        try:
            self._storage.write(self._key, serialize_cart(items))
        except Exception as e:
            logger.error("Failed to persist cart under %s: %s", self._key, e)
            raise StorageFailure(self._key, str(e)) from e
        self._items = items

    def _ensure_stock(self, product_id: int, amount: int) -> None:
        stock = self._get_stock(product_id)
        if stock.available_amount < amount:
            raise InsufficientStock(product_id, amount, stock.available_amount)

    def _set_amount(self, product_id: int, amount: int) -> None:
        if amount <= 0:
            logger.debug("Ignoring amount %d for product %d", amount, product_id)
            return

        self._ensure_stock(product_id, amount)

        if self.find(product_id) is None:
            # TODO: confirm with product owners whether this should raise ProductNotInCart
            logger.warning("Amount update for product %d which is not in the cart; ignored.", product_id)
            return

        updated = [
            it.with_amount(amount) if it.product_id == product_id else it
            for it in self._items
        ]
        self._commit(updated)
        logger.info("Product %d amount set to %d", product_id, amount)

    def add_product(self, product_id: int) -> None:
        with self._lock:
            existing = self.find(product_id)
            if existing is not None:
                self._set_amount(product_id, existing.amount + 1)
                return

            self._ensure_stock(product_id, 1)
            product = self._get_product(product_id)
            self._commit(self._items + [CartItem.from_product(product)])
            logger.info("Added product %d (%s) to cart", product_id, product.title)

    def remove_product(self, product_id: int) -> None:
        with self._lock:
            updated = [it for it in self._items if it.product_id != product_id]
            if len(updated) == len(self._items):
                raise ProductNotInCart(product_id)
            self._commit(updated)
            logger.info("Removed product %d from cart", product_id)

    def update_amount(self, product_id: int, amount: int) -> None:
        with self._lock:
            self._set_amount(product_id, amount)
