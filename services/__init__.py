from . import catalog
from . import stock

fetch_product = catalog.fetch_product
fetch_stock = stock.fetch_stock
