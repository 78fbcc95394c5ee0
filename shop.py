import argparse
import sys
from typing import List, Optional

from core.logger import get_logger
from core.cart import CART_STORAGE_KEY, CartManager
from core.notifications import Notifier
from core.provider import CartProvider
from core.storage import DB_PATH, SQLiteStorage

logger = get_logger(__name__)


def build_provider(storage: SQLiteStorage, notifier: Optional[Notifier] = None) -> CartProvider:
    manager = CartManager(storage)
    return CartProvider(manager, notifier or Notifier())


def format_cart(provider: CartProvider) -> str:
    items = provider.cart
    if not items:
        return "Cart is empty."

    lines = []
    for it in items:
        lines.append(
            f"{it.product_id:>6}  {it.title:<30}  {it.amount:>3} x {it.unit_price:>9.2f}  = {it.subtotal:.2f}"
        )
    lines.append(f"Total: {provider.manager.total:.2f}")
    return "\n".join(lines)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="shop", description="Manage the local shopping cart.")
    parser.add_argument("--db", default=DB_PATH, help="path to the cart database")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="print the cart")

    add = sub.add_parser("add", help="add one unit of a product")
    add.add_argument("product_id", type=int)

    remove = sub.add_parser("remove", help="remove a product")
    remove.add_argument("product_id", type=int)

    update = sub.add_parser("update", help="set the amount of a product")
    update.add_argument("product_id", type=int)
    update.add_argument("amount", type=int)

    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    storage = SQLiteStorage(args.db)
    provider = build_provider(storage)

    if args.command == "add":
        ok = provider.add_product(args.product_id)
    elif args.command == "remove":
        ok = provider.remove_product(args.product_id)
    elif args.command == "update":
        ok = provider.update_product_amount(product_id=args.product_id, amount=args.amount)
    else:
        ok = True

    if not ok:
        note = provider.notifier.last
        print(f"error: {note.message}" if note else "error", file=sys.stderr)
        return 1

    print(format_cart(provider))
    if args.command == "show":
        saved_at = storage.read_updated_at(CART_STORAGE_KEY)
        if saved_at:
            print(f"Last saved: {saved_at}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    try:
        return run(argv)
    except Exception as e:
        logger.exception("Fatal cart error: %s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
