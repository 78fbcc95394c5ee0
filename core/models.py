# core/models.py
from dataclasses import asdict, dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict


def to_decimal(value: Any) -> Decimal:
    """
    Convert a JSON price (int, float, str or Decimal) into a Decimal.
    Raises ValueError for NaN, infinities and negative prices.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"invalid price: {value!r}")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"invalid price: {value!r}")
    if not price.is_finite() or price < 0:
        raise ValueError(f"invalid price: {value!r}")
    return price


@dataclass(frozen=True)
class ProductInfo:
    """Catalog metadata for a product, as returned by the Catalog Service."""
    product_id: int
    title: str
    image: str
    unit_price: Decimal


@dataclass(frozen=True)
class StockInfo:
    product_id: int
    available_amount: int


@dataclass(frozen=True)
class CartItem:
    """
    One line of the cart. Items are immutable; changing the amount produces
    a new item via with_amount().
    """
    product_id: int
    title: str
    image: str
    unit_price: Decimal
    amount: int = 1

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.amount

    def with_amount(self, amount: int) -> "CartItem":
        return replace(self, amount=amount)

    @classmethod
    def from_product(cls, product: ProductInfo, amount: int = 1) -> "CartItem":
        return cls(
            product_id=product.product_id,
            title=product.title,
            image=product.image,
            unit_price=product.unit_price,
            amount=amount,
        )

    def to_snapshot(self) -> Dict[str, Any]:
        """Serialize using the storage field names (id/title/image/price/amount)."""
        data = asdict(self)
        return {
            "id": data["product_id"],
            "title": data["title"],
            "image": data["image"],
            "price": data["unit_price"],
            "amount": data["amount"],
        }

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> "CartItem":
        """
        Build an item from one stored snapshot entry.
        Raises ValueError/KeyError/TypeError on malformed entries.
        """
        product_id = data["id"]
        amount = data["amount"]
        if isinstance(product_id, bool) or not isinstance(product_id, int):
            raise ValueError(f"invalid product id: {product_id!r}")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
            raise ValueError(f"invalid amount: {amount!r}")
        return cls(
            product_id=product_id,
            title=str(data["title"]),
            image=str(data["image"]),
            unit_price=to_decimal(data["price"]),
            amount=amount,
        )
