from __future__ import annotations

import logging
import secrets
import string
from typing import List, Optional
from urllib.parse import quote

from storefront.cart.engine import cart_total
from storefront.config import settings
from storefront.constants import WHATSAPP_SEND_URL
from storefront.models import CartLine
from storefront.utils.formatters import format_price, is_number
from storefront.utils.validators import digits_only

logger = logging.getLogger(__name__)

ORDER_REF_ALPHABET = string.ascii_uppercase + string.digits
# mismo conjunto que encodeURIComponent deja sin escapar
URI_COMPONENT_SAFE = "-_.!~*'()"


def format_whatsapp_number(number: str, country_code: Optional[str] = None) -> str:
    country_code = country_code or settings.country_code
    cleaned = digits_only(number)
    if cleaned.startswith("0"):
        cleaned = cleaned[1:]
    if len(cleaned) >= 9 and not cleaned.startswith(country_code):
        return f"{country_code}{cleaned}"
    return cleaned


def order_reference(length: int = 6) -> str:
    return "".join(secrets.choice(ORDER_REF_ALPHABET) for _ in range(length))


def _line_subtotal(line: CartLine) -> float:
    return (line.price if is_number(line.price) else 0) * line.quantity


def build_order_message(lines: List[CartLine], order_ref: str) -> str:
    items = "\n\n".join(
        f"✅ *{line.quantity}x* {line.name}\n   Precio: {format_price(_line_subtotal(line))}"
        for line in lines
    )
    return (
        f"📦 *NUEVO PEDIDO - #{order_ref}*\n\n"
        "Hola! Quisiera realizar el siguiente pedido:\n\n"
        f"{items}\n\n"
        "-------------------------------\n"
        f"💰 *TOTAL: {format_price(cart_total(lines))}*\n"
        "-------------------------------\n\n"
        "Por favor, confírmame disponibilidad para coordinar la entrega."
    )


def build_checkout_url(lines: List[CartLine], whatsapp_number: str, order_ref: Optional[str] = None) -> str:
    """WhatsApp deep link carrying the order summary. The cart must not be empty."""
    order_ref = order_ref or order_reference()
    phone = format_whatsapp_number(whatsapp_number)
    text = quote(build_order_message(lines, order_ref), safe=URI_COMPONENT_SAFE)
    url = f"{WHATSAPP_SEND_URL}?phone={phone}&text={text}"
    logger.info("Checkout #%s for %s with %d lines", order_ref, phone, len(lines))
    return url
