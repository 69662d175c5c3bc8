"""
Unit tests for the pricing engine.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from helpers import make_line
from petshop.models import DeliveryMethod, ProductPricing, PromoCode, PromoRule
from petshop.services.pricing import (
    PricingPolicy,
    actual_savings,
    compute_breakdown,
    discount_percentage,
    round_amount,
)
from petshop.services.promo import PROMO_TABLE

WELCOME10 = PromoCode(code="WELCOME10", rule=PROMO_TABLE["WELCOME10"])
FREE = PromoCode(code="FREE", rule=PromoRule(percent=Decimal("100")))


class TestBreakdown:
    """Tests for compute_breakdown."""

    def test_standard_delivery_without_promo(self):
        """A 1000 subtotal carries 90 + 90 tax."""
        breakdown = compute_breakdown([make_line(500, 2)])

        assert breakdown.subtotal == Decimal("1000")
        assert breakdown.cgst == Decimal("90")
        assert breakdown.sgst == Decimal("90")
        assert breakdown.total_tax == Decimal("180")
        assert breakdown.delivery_fee == Decimal("0")
        assert breakdown.promo_code is None
        assert breakdown.promo_discount == Decimal("0")
        assert breakdown.total == Decimal("1180")

    def test_promo_discounts_subtotal_plus_tax(self):
        breakdown = compute_breakdown([make_line(500, 2)], promo=WELCOME10)

        assert breakdown.promo_code == "WELCOME10"
        assert breakdown.promo_discount == Decimal("118")
        assert breakdown.total == Decimal("1062")

    def test_express_fee_is_not_discounted(self):
        breakdown = compute_breakdown(
            [make_line(500, 2)], DeliveryMethod.EXPRESS, WELCOME10
        )

        assert breakdown.delivery_fee == Decimal("99")
        assert breakdown.promo_discount == Decimal("118")
        assert breakdown.total == Decimal("1161")

    def test_multiple_lines_are_summed(self):
        lines = [
            make_line(210, 2, line_id="a"),
            make_line(790, 1, line_id="b", product_id="prod-003"),
        ]
        breakdown = compute_breakdown(lines)

        assert breakdown.subtotal == Decimal("1210")
        # 108.9 rounds to 109
        assert breakdown.cgst == Decimal("109")
        assert breakdown.total == Decimal("1428")

    @pytest.mark.parametrize("price", [1, 5, 17, 50, 199, 333, 1005, 2499])
    def test_cgst_equals_sgst(self, price):
        breakdown = compute_breakdown([make_line(price, 1)])

        assert breakdown.cgst == breakdown.sgst
        assert breakdown.total_tax == breakdown.cgst * 2

    def test_tax_rounds_half_up(self):
        """50 x 0.09 = 4.5 rounds to 5."""
        breakdown = compute_breakdown([make_line(50, 1)])

        assert breakdown.cgst == Decimal("5")
        assert breakdown.total == Decimal("60")

    def test_empty_cart_is_all_zero(self):
        breakdown = compute_breakdown([], DeliveryMethod.EXPRESS, WELCOME10)

        assert breakdown.subtotal == 0
        assert breakdown.total_tax == 0
        assert breakdown.delivery_fee == 0
        assert breakdown.promo_discount == 0
        assert breakdown.total == 0

    def test_no_discount_on_zero_subtotal(self):
        breakdown = compute_breakdown([make_line(0, 3)], DeliveryMethod.EXPRESS, WELCOME10)

        assert breakdown.promo_discount == Decimal("0")
        assert breakdown.total == Decimal("99")

    def test_full_discount_never_goes_negative(self):
        breakdown = compute_breakdown([make_line(999, 1)], DeliveryMethod.EXPRESS, FREE)

        assert breakdown.promo_discount == breakdown.subtotal + breakdown.total_tax
        assert breakdown.total == Decimal("99")

    def test_custom_policy(self):
        policy = PricingPolicy(
            cgst_rate=Decimal("0.06"),
            sgst_rate=Decimal("0.06"),
            express_fee=Decimal("150"),
        )
        breakdown = compute_breakdown([make_line(1000, 1)], DeliveryMethod.EXPRESS, policy=policy)

        assert breakdown.cgst == Decimal("60")
        assert breakdown.total == Decimal("1270")

    def test_breakdown_is_immutable(self):
        breakdown = compute_breakdown([make_line(100, 1)])

        with pytest.raises(ValidationError):
            breakdown.total = Decimal("0")


class TestPricingPolicy:
    """Tests for PricingPolicy."""

    def test_from_settings(self):
        settings = SimpleNamespace(
            tax_rate_cgst=Decimal("0.05"),
            tax_rate_sgst=Decimal("0.04"),
            express_delivery_fee=Decimal("49"),
        )
        policy = PricingPolicy.from_settings(settings)

        assert policy.cgst_rate == Decimal("0.05")
        assert policy.sgst_rate == Decimal("0.04")
        assert policy.delivery_fee(DeliveryMethod.EXPRESS) == Decimal("49")
        assert policy.delivery_fee(DeliveryMethod.STANDARD) == Decimal("0")

    def test_round_amount(self):
        assert round_amount(Decimal("2.5")) == Decimal("3")
        assert round_amount(Decimal("2.49")) == Decimal("2")


class TestPromoRuleBounds:
    """Promo rules outside (0, 100] are refused."""

    @pytest.mark.parametrize("percent", ["0", "-5", "100.01", "150"])
    def test_out_of_range_percent(self, percent):
        with pytest.raises(ValidationError):
            PromoRule(percent=Decimal(percent))


class TestSavings:
    """Tests for catalog savings annotations."""

    def test_discount_percentage(self):
        assert discount_percentage(ProductPricing(old_price=Decimal("240"), discount_price=Decimal("210"))) == 13
        assert discount_percentage(ProductPricing(old_price=Decimal("980"), discount_price=Decimal("790"))) == 19

    def test_discount_percentage_without_markdown(self):
        assert discount_percentage(None) == 0
        assert discount_percentage(ProductPricing(discount_price=Decimal("199"))) == 0
        assert discount_percentage(ProductPricing(old_price=Decimal("100"), discount_price=Decimal("120"))) == 0

    def test_actual_savings(self):
        lines = [
            make_line(210, 2, line_id="a", product_id="prod-001"),
            make_line(250, 1, line_id="b", product_id="prod-002"),
            make_line(100, 1, line_id="c", product_id="unknown"),
        ]
        pricing = {
            "prod-001": ProductPricing(old_price=Decimal("240"), discount_price=Decimal("210")),
            # captured price above the old price saves nothing
            "prod-002": ProductPricing(old_price=Decimal("200"), discount_price=Decimal("180")),
        }

        assert actual_savings(lines, pricing) == Decimal("60")

    def test_catalog_never_overrides_line_price(self):
        line = make_line(210, 1, product_id="prod-001")
        pricing = {"prod-001": ProductPricing(old_price=Decimal("240"), discount_price=Decimal("150"))}

        assert compute_breakdown([line]).subtotal == Decimal("210")
        assert actual_savings([line], pricing) == Decimal("30")
