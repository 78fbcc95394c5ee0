# services/stock.py
from core.errors import RemoteServiceFailure
from core.logger import get_logger
from core.models import StockInfo

from .http import get_json

logger = get_logger(__name__)

SERVICE = "stock"


def fetch_stock(product_id: int) -> StockInfo:
    data = get_json(SERVICE, f"/stock/{product_id}", product_id)
    amount = data.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise RemoteServiceFailure(SERVICE, product_id, f"malformed stock amount: {amount!r}")

    logger.debug("Stock: %d available for product %d", amount, product_id)
    return StockInfo(product_id=product_id, available_amount=amount)
