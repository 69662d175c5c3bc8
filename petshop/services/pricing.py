"""
Pricing Engine

Pure functions turning cart lines, a delivery method and an optional promo
into a price breakdown. Amounts are Decimal and rounded half-up to whole
currency units.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from ..models.cart import CartLine
from ..models.checkout import DeliveryMethod, PriceBreakdown
from ..models.product import ProductPricing
from ..models.promo import PromoCode

ZERO = Decimal("0")


def round_amount(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricingPolicy:
    """Tax rates and delivery fees"""
    cgst_rate: Decimal = Decimal("0.09")
    sgst_rate: Decimal = Decimal("0.09")
    express_fee: Decimal = Decimal("99")

    @classmethod
    def from_settings(cls, settings) -> "PricingPolicy":
        return cls(
            cgst_rate=settings.tax_rate_cgst,
            sgst_rate=settings.tax_rate_sgst,
            express_fee=settings.express_delivery_fee,
        )

    def delivery_fee(self, delivery: DeliveryMethod) -> Decimal:
        if delivery == DeliveryMethod.EXPRESS:
            return self.express_fee
        return ZERO


DEFAULT_POLICY = PricingPolicy()


def compute_subtotal(lines: Iterable[CartLine]) -> Decimal:
    return sum((line.unit_price * line.quantity for line in lines), ZERO)


def compute_breakdown(
    lines: Iterable[CartLine],
    delivery: DeliveryMethod = DeliveryMethod.STANDARD,
    promo: Optional[PromoCode] = None,
    policy: PricingPolicy = DEFAULT_POLICY,
) -> PriceBreakdown:
    """
    Price a cart.

    The two tax lines are each rounded from the subtotal on their own. The
    promo discount is taken off subtotal plus tax, never off the delivery fee,
    and is capped at that base so the total cannot go negative.

    Args:
        lines: Cart lines to price
        delivery: Delivery method
        promo: Applied promo, if any
        policy: Tax rates and delivery fees

    Returns:
        PriceBreakdown; all zeros for an empty cart
    """
    lines = list(lines)
    if not lines:
        return PriceBreakdown()

    subtotal = compute_subtotal(lines)
    cgst = round_amount(subtotal * policy.cgst_rate)
    sgst = round_amount(subtotal * policy.sgst_rate)
    total_tax = cgst + sgst
    delivery_fee = policy.delivery_fee(delivery)

    promo_discount = ZERO
    if promo is not None and subtotal > 0:
        base = subtotal + total_tax
        promo_discount = min(round_amount(base * promo.rule.rate), base)

    total = max(subtotal + total_tax + delivery_fee - promo_discount, ZERO)

    return PriceBreakdown(
        subtotal=subtotal,
        cgst=cgst,
        sgst=sgst,
        total_tax=total_tax,
        delivery_fee=delivery_fee,
        promo_code=promo.code if promo is not None else None,
        promo_discount=promo_discount,
        total=total,
    )


def discount_percentage(pricing: Optional[ProductPricing]) -> int:
    """Markdown of the catalog price as a whole percentage"""
    if pricing is None or not pricing.old_price or not pricing.discount_price:
        return 0
    if pricing.old_price <= pricing.discount_price:
        return 0
    ratio = (pricing.old_price - pricing.discount_price) / pricing.old_price * 100
    return int(round_amount(ratio))


def actual_savings(
    lines: Iterable[CartLine],
    pricing_by_product: dict[str, ProductPricing],
) -> Decimal:
    """What the cart saves against catalog old prices"""
    savings = ZERO
    for line in lines:
        pricing = pricing_by_product.get(line.product_id)
        if pricing is None or not pricing.old_price:
            continue
        if pricing.old_price <= line.unit_price:
            continue
        savings += (pricing.old_price - line.unit_price) * line.quantity
    return savings
