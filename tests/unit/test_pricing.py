"""
Unit Tests - Prices, Totals and Card Masking
"""
from decimal import Decimal

import pytest

from storefront.database.models import Product
from storefront.services.cart import effective_price
from storefront.services.checkout import confirmation_link, render_confirmation_email
from storefront.services.customers import mask_credit_card
from storefront.services.orders import compute_total
from storefront.services.payments import to_minor_units


class TestEffectivePrice:
    """Tests for effective_price"""

    def test_discount_applies(self):
        product = Product(name="Tee", price=Decimal("16.95"), discounted_price=Decimal("15.95"))

        assert effective_price(product) == Decimal("15.95")

    def test_zero_discount_means_list_price(self):
        product = Product(name="Tee", price=Decimal("14.99"), discounted_price=Decimal("0.00"))

        assert effective_price(product) == Decimal("14.99")


class TestComputeTotal:
    """Tests for order total calculation"""

    def test_tax_and_shipping_added(self):
        total = compute_total(Decimal("29.98"), Decimal("8.50"), Decimal("20.00"))

        assert total == Decimal("52.53")

    def test_no_tax(self):
        assert compute_total(Decimal("10.00"), Decimal("0"), Decimal("5.00")) == Decimal("15.00")


class TestMinorUnits:
    """Tests for to_minor_units"""

    @pytest.mark.parametrize("amount,expected", [
        (Decimal("52.53"), 5253),
        (Decimal("0.10"), 10),
        (Decimal("19.995"), 2000),
    ])
    def test_conversion(self, amount, expected):
        assert to_minor_units(amount) == expected


class TestCardMasking:
    """Tests for mask_credit_card"""

    def test_keeps_last_four(self):
        assert mask_credit_card("4242424242424242") == "XXXXXXXXXXXX4242"

    def test_missing_card(self):
        assert mask_credit_card(None) is None


class TestConfirmationEmail:
    """Tests for the confirmation email body"""

    def test_link_uses_public_base_url(self):
        assert confirmation_link("abc") == "http://shop.test/order/status/abc"

    def test_lists_items_and_escapes_names(self):
        html = render_confirmation_email(
            [{"quantity": 2, "product_name": "Tom & Jerry"}],
            Decimal("12.5"),
            "http://shop.test/order/status/abc",
        )

        assert "Tom &amp; Jerry" in html
        assert "$12.50" in html
        assert 'href="http://shop.test/order/status/abc"' in html
