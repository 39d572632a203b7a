from urllib.parse import parse_qs, urlparse

import pytest

from storefront.models import CartLine
from storefront.services.checkout import (
    build_checkout_url,
    build_order_message,
    format_whatsapp_number,
    order_reference,
)
from storefront.utils.formatters import format_price


class TestWhatsappNumber:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("0991234567", "593991234567"),
            ("593991234567", "593991234567"),
            ("+593 99 123 4567", "593991234567"),
            ("099-123-4567", "593991234567"),
            ("12345", "12345"),
            ("", ""),
        ],
    )
    def test_normalization(self, raw, expected):
        assert format_whatsapp_number(raw, country_code="593") == expected

    def test_only_one_leading_zero_is_stripped(self):
        assert format_whatsapp_number("00991234567", country_code="593") == "5930991234567"
        assert format_whatsapp_number("0012345", country_code="593") == "012345"


class TestFormatPrice:
    @pytest.mark.parametrize(
        "value,expected",
        [(0, "$0.00"), (10, "$10.00"), (1234.5, "$1,234.50"), (None, "$0.00"), ("x", "$0.00"), (float("nan"), "$0.00")],
    )
    def test_format(self, value, expected):
        assert format_price(value) == expected


class TestOrderMessage:
    @pytest.fixture
    def lines(self, make_product):
        return [
            CartLine(make_product("1", name="Cámara IP", price=35.5), 2),
            CartLine(make_product("2", name="Memoria 64GB", price=12), 1),
        ]

    def test_message_lists_lines_and_total(self, lines):
        msg = build_order_message(lines, "AB12CD")

        assert "#AB12CD" in msg
        assert "*2x* Cámara IP\n   Precio: $71.00" in msg
        assert "*1x* Memoria 64GB\n   Precio: $12.00" in msg
        assert "TOTAL: $83.00" in msg
        assert msg.index("Cámara IP") < msg.index("Memoria 64GB")

    def test_order_reference(self):
        ref = order_reference()
        assert len(ref) == 6
        assert ref.isalnum() and ref.upper() == ref

    def test_checkout_url(self, lines):
        url = build_checkout_url(lines, "0991234567", order_ref="XYZ789")
        parsed = urlparse(url)
        query = parse_qs(parsed.query)

        assert url.startswith("https://api.whatsapp.com/send?phone=")
        assert query["phone"] == ["593991234567"]
        assert query["text"] == [build_order_message(lines, "XYZ789")]
        assert " " not in url and "\n" not in url

    def test_encoding_matches_uri_component(self, make_product):
        lines = [CartLine(make_product("1", name="A&B (x)", price=1), 1)]
        url = build_checkout_url(lines, "593991234567", order_ref="R")
        text = url.split("&text=", 1)[1]

        assert "A%26B%20(x)" in text
        assert "%0A" in text
