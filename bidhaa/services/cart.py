"""
Cart held by the client under a single storage key.

The storefront never persists carts; these helpers give the server (and
tests) the same arithmetic the browser does, over any dict-like storage.
"""
import hashlib
import json
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, MutableMapping, Optional

logger = logging.getLogger(__name__)

CART_KEY = "cart"
TWOPLACES = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def derive_product_id(name: str, category: str, price) -> str:
    """Stable id for products rendered without one: name + category + price."""
    digest = hashlib.md5(f"{name}{category}{price}".encode()).hexdigest()
    return f"prod-{digest[:8]}"


def _coerce_quantity(value) -> int:
    try:
        qty = int(value)
    except (TypeError, ValueError):
        return 1
    return qty if qty >= 1 else 1


class Cart:
    def __init__(self, items: Optional[Iterable[dict]] = None):
        self.items: List[dict] = []
        for item in items or []:
            self.add(item, quantity=item.get("quantity", 1))

    def find(self, product_id: str) -> Optional[dict]:
        return next((i for i in self.items if i["id"] == product_id), None)

    def add(self, product: dict, quantity: int = 1) -> dict:
        """Add a product; a product already in the cart gets its quantity raised."""
        product_id = product.get("id") or derive_product_id(
            product.get("name", ""), product.get("category", ""), product.get("price", 0)
        )
        quantity = _coerce_quantity(quantity)
        existing = self.find(product_id)
        if existing:
            existing["quantity"] += quantity
            return existing
        entry = {
            "id": product_id,
            "name": product.get("name") or "Unnamed Product",
            "price": float(product.get("price") or 0),
            "image": product.get("image") or "",
            "category": product.get("category") or "General",
            "quantity": quantity,
        }
        self.items.append(entry)
        return entry

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity < 1:
            self.remove(product_id)
            return
        item = self.find(product_id)
        if item:
            item["quantity"] = int(quantity)

    def remove(self, product_id: str) -> None:
        self.items = [i for i in self.items if i["id"] != product_id]

    def clear(self) -> None:
        self.items = []

    @property
    def total_quantity(self) -> int:
        return sum(i["quantity"] for i in self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((to_money(i["price"]) * i["quantity"] for i in self.items), Decimal("0.00"))

    def __len__(self):
        return len(self.items)

    def to_list(self) -> List[dict]:
        return [dict(i) for i in self.items]


def load_cart(storage: MutableMapping) -> Cart:
    raw = storage.get(CART_KEY)
    if not raw:
        return Cart()
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning("Cart data corrupted, resetting: %s", e)
        return Cart()
    if not isinstance(data, list):
        logger.warning("Cart data is not a list, resetting")
        return Cart()
    return Cart(i for i in data if isinstance(i, dict))


def save_cart(storage: MutableMapping, cart: Cart) -> None:
    storage[CART_KEY] = json.dumps(cart.to_list())
