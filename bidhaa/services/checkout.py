"""
Checkout order draft: customer -> shipping -> payment, then a WhatsApp hand-off.

The draft is client-held (storage key ``orderData``); nothing here writes
to the database.
"""
import enum
import json
import logging
import re
from decimal import Decimal
from typing import MutableMapping, Optional
from urllib.parse import quote

from bidhaa.services.cart import Cart, to_money

logger = logging.getLogger(__name__)

ORDER_KEY = "orderData"
DEFAULT_SHIPPING_FEE = Decimal("200.00")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[0-9]{10}$")
SHIPPING_FIELDS = (
    ("county", "County"),
    ("town", "Town/Province"),
    ("deliveryAddress", "Delivery Address"),
    ("contactPerson", "Contact Person"),
    ("phoneNumber", "Phone Number"),
)


class CheckoutStep(str, enum.Enum):
    CUSTOMER = "customer"
    SHIPPING = "shipping"
    PAYMENT = "payment"


class CheckoutError(ValueError):
    pass


def format_kes(amount) -> str:
    return f"KES {to_money(amount):,.2f}"


class OrderDraft:
    def __init__(self, cart: Optional[Cart] = None, shipping_fee=DEFAULT_SHIPPING_FEE,
                 customer=None, shipping=None, step=CheckoutStep.CUSTOMER):
        self.cart = cart if cart is not None else Cart()
        self.customer = dict(customer or {})
        self.shipping = dict(shipping or {})
        self.step = CheckoutStep(step)
        self.shipping_fee = to_money(shipping_fee)
        self.default_fee = self.shipping_fee

    # --- totals ---

    @property
    def subtotal(self) -> Decimal:
        return self.cart.subtotal

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.shipping_fee

    def totals(self) -> dict:
        return {
            "subtotal": float(self.subtotal),
            "shipping": float(self.shipping_fee),
            "total": float(self.total),
        }

    # --- transitions ---

    def set_cart(self, cart: Cart) -> None:
        self.cart = cart

    def select_county(self, county: Optional[str]) -> None:
        """Flat fee for any county, nothing until one is picked."""
        self.shipping["county"] = county or ""
        self.shipping_fee = self.default_fee if county else Decimal("0.00")

    def submit_customer(self, email: str, subscribed: bool = False) -> None:
        email = (email or "").strip()
        if not email:
            raise CheckoutError("Email is required")
        if not EMAIL_RE.match(email):
            raise CheckoutError("Please enter a valid email")
        self.customer = {"email": email, "subscribed": bool(subscribed)}
        self.step = CheckoutStep.SHIPPING

    def submit_shipping(self, **fields) -> None:
        for key, label in SHIPPING_FIELDS:
            if not (fields.get(key) or "").strip():
                raise CheckoutError(f"Please fill in the {label} field.")
        if not PHONE_RE.match(fields["phoneNumber"].strip()):
            raise CheckoutError("Please enter a valid 10-digit phone number")
        self.shipping = {key: fields[key].strip() for key, _ in SHIPPING_FIELDS}
        self.select_county(self.shipping["county"])
        self.step = CheckoutStep.PAYMENT

    # --- hand-off ---

    def whatsapp_message(self) -> str:
        c, s = self.customer, self.shipping
        lines = [
            "*NEW ORDER - MyBidhaa*",
            "",
            "*Customer Information*",
            f"Email: {c.get('email') or 'Not provided'}",
            f"Subscribed: {'Yes' if c.get('subscribed') else 'No'}",
            "",
            "*Shipping Details*",
            f"County: {s.get('county') or 'Not provided'}",
            f"Town: {s.get('town') or 'Not provided'}",
            f"Address: {s.get('deliveryAddress') or 'Not provided'}",
            f"Contact: {s.get('contactPerson') or 'Not provided'}",
            f"Phone: {s.get('phoneNumber') or 'Not provided'}",
            "",
            "*Order Summary*",
        ]
        for item in self.cart.items:
            line_total = to_money(item["price"]) * item["quantity"]
            lines.append(
                f"{item['name']} ({item['quantity']} × {format_kes(item['price'])}) - {format_kes(line_total)}"
            )
        lines += [
            "",
            f"Subtotal: {format_kes(self.subtotal)}",
            f"Shipping: {format_kes(self.shipping_fee)}",
            f"*Total: {format_kes(self.total)}*",
        ]
        return "\n".join(lines)

    def whatsapp_link(self, number: str) -> str:
        if not self.shipping.get("phoneNumber"):
            raise CheckoutError("Please complete all shipping information first")
        if not self.cart.items:
            raise CheckoutError("Your cart is empty")
        return f"https://wa.me/{number}?text={quote(self.whatsapp_message(), safe='')}"

    # --- storage ---

    def to_dict(self) -> dict:
        return {
            "customer": self.customer,
            "shipping": self.shipping,
            "cart": self.cart.to_list(),
            "totals": self.totals(),
            "currentStep": self.step.value,
        }

    @classmethod
    def from_dict(cls, data: dict, shipping_fee=DEFAULT_SHIPPING_FEE) -> "OrderDraft":
        totals = data.get("totals") or {}
        draft = cls(
            cart=Cart(i for i in data.get("cart") or [] if isinstance(i, dict)),
            shipping_fee=shipping_fee,
            customer=data.get("customer"),
            shipping=data.get("shipping"),
            step=data.get("currentStep") or CheckoutStep.CUSTOMER,
        )
        if "shipping" in totals:
            draft.shipping_fee = to_money(totals["shipping"])
        return draft


def load_order_draft(storage: MutableMapping, cart: Optional[Cart] = None) -> OrderDraft:
    """Restore the draft; a missing or unreadable one starts over from ``cart``."""
    raw = storage.get(ORDER_KEY)
    if raw:
        try:
            return OrderDraft.from_dict(json.loads(raw))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Order draft corrupted, starting over: %s", e)
    return OrderDraft(cart=cart)


def save_order_draft(storage: MutableMapping, draft: OrderDraft) -> None:
    storage[ORDER_KEY] = json.dumps(draft.to_dict())


def clear_order_draft(storage: MutableMapping) -> None:
    storage.pop(ORDER_KEY, None)
