# services/catalog.py
from core.errors import RemoteServiceFailure
from core.logger import get_logger
from core.models import ProductInfo, to_decimal

from .http import get_json

logger = get_logger(__name__)

SERVICE = "catalog"


def fetch_product(product_id: int) -> ProductInfo:
    """Look up title, image and price for a product id."""
    data = get_json(SERVICE, f"/products/{product_id}", product_id)
    try:
        product = ProductInfo(
            product_id=product_id,
            title=str(data["title"]),
            image=str(data.get("image") or ""),
            unit_price=to_decimal(data["price"]),
        )
    except (KeyError, ValueError) as e:
        raise RemoteServiceFailure(SERVICE, product_id, f"malformed product: {e}") from e

    logger.debug("Catalog: product %d is %r at %s", product_id, product.title, product.unit_price)
    return product
