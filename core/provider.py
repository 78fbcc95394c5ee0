# core/provider.py
from typing import Tuple

from .cart import CartManager
from .errors import CartError
from .logger import get_logger
from .models import CartItem
from .notifications import Notifier

logger = get_logger(__name__)


class CartProvider:
    """
    Boundary between the cart and the presentation layer.

    Mutations never raise: failures become a single notification and the
    call returns False.
    """

    def __init__(self, manager: CartManager, notifier: Notifier):
        self.manager = manager
        self.notifier = notifier

    @property
    def cart(self) -> Tuple[CartItem, ...]:
        return self.manager.cart

    def _run(self, operation: str, fn, *args) -> bool:
        try:
            fn(*args)
        except CartError as e:
            self.notifier.operation_failed(operation, e)
            return False
        except Exception as e:
            logger.exception("Unexpected error during cart %s: %s", operation, e)
            self.notifier.operation_failed(operation, e)
            return False
        return True

    def add_product(self, product_id: int) -> bool:
        return self._run("add", self.manager.add_product, product_id)

    def remove_product(self, product_id: int) -> bool:
        return self._run("remove", self.manager.remove_product, product_id)

    def update_product_amount(self, *, product_id: int, amount: int) -> bool:
        return self._run("update", self.manager.update_amount, product_id, amount)
