# core/errors.py


class CartError(Exception):
    """Base class for every failure a cart operation can report."""


class InsufficientStock(CartError):
    def __init__(self, product_id: int, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"product {product_id}: requested {requested}, only {available} in stock"
        )


class ProductNotInCart(CartError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"product {product_id} is not in the cart")


class RemoteServiceFailure(CartError):
    """Catalog or stock lookup failed (HTTP error, timeout, bad payload)."""

    def __init__(self, service: str, product_id: int, reason: str):
        self.service = service
        self.product_id = product_id
        self.reason = reason
        super().__init__(f"{service} lookup for product {product_id} failed: {reason}")


class StorageFailure(CartError):
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"writing {key!r} failed: {reason}")
