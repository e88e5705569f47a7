"""
"Buy Now" orders are not stored: the customer's details are formatted into
a message and handed to WhatsApp through a wa.me deep link.
"""

from dataclasses import dataclass
from typing import Any, Dict
from urllib.parse import quote

WHATSAPP_BASE_URL = "https://wa.me"


@dataclass
class OrderForm:
    name: str = ""
    mobile: str = ""
    address: str = ""
    quantity: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderForm":
        try:
            quantity = int(data.get("quantity") or 1)
        except (TypeError, ValueError):
            quantity = 1
        return cls(
            name=str(data.get("name") or "").strip(),
            mobile=str(data.get("mobile") or "").strip(),
            address=str(data.get("address") or "").strip(),
            quantity=quantity,
        )

    def missing_fields(self):
        return [f for f in ("name", "mobile", "address") if not getattr(self, f)]

    def is_valid(self) -> bool:
        return not self.missing_fields() and self.quantity >= 1


def format_price(amount) -> str:
    amount = float(amount or 0)
    if amount.is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def build_order_message(product, form: OrderForm) -> str:
    lines = [
        "Hi, I want to buy:",
        "",
        f"Product: {product.title}",
    ]
    if getattr(product, "model_no", None):
        lines.append(f"Model: {product.model_no}")
    lines += [
        f"Price: ₹{format_price(product.price)}",
        f"Quantity: {form.quantity}",
        "",
        "Customer Details:",
        f"Name: {form.name}",
        f"Mobile: {form.mobile}",
        f"Address: {form.address}",
    ]
    return "\n".join(lines)


def whatsapp_url(number: str, message: str) -> str:
    return f"{WHATSAPP_BASE_URL}/{number}?text={quote(message, safe='')}"
