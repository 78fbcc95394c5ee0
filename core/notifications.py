# core/notifications.py
import os
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional

from .errors import CartError, InsufficientStock
from .logger import get_logger

logger = get_logger(__name__)

OUT_OF_STOCK = "Requested amount is out of stock"
ADD_FAILED = "Could not add product to cart"
UPDATE_FAILED = "Could not change product amount"
REMOVE_FAILED = "Could not remove product from cart"

NOTIFY_HISTORY = int(os.getenv("NOTIFY_HISTORY", "50"))

_GENERIC = {
    "add": ADD_FAILED,
    "update": UPDATE_FAILED,
    "remove": REMOVE_FAILED,
}


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


def message_for(operation: str, error: Optional[BaseException]) -> str:
    """
    Pick the user-facing text for a failed operation.
    Stock problems get their own message; everything else falls back to the
    operation's generic one.
    """
    if isinstance(error, InsufficientStock):
        return OUT_OF_STOCK
    return _GENERIC[operation]


class Notifier:
    """
    Keeps the most recent user-facing notifications. An optional callback
    (e.g. a UI toast hook) is invoked for each one as it arrives.
    """

    def __init__(
        self,
        on_notify: Optional[Callable[[Notification], None]] = None,
        history: int = NOTIFY_HISTORY,
    ):
        self.sent: Deque[Notification] = deque(maxlen=max(1, history))
        self._on_notify = on_notify

    def error(self, message: str) -> Notification:
        note = Notification(level="error", message=message)
        self.sent.append(note)
        logger.warning("Notify user: %s", message)
        if self._on_notify:
            self._on_notify(note)
        return note

    def operation_failed(self, operation: str, error: Optional[BaseException]) -> Notification:
        if isinstance(error, CartError):
            logger.info("Cart %s failed: %s", operation, error)
        return self.error(message_for(operation, error))

    @property
    def last(self) -> Optional[Notification]:
        return self.sent[-1] if self.sent else None
