"""Invoice rows and currency formatting for a completed order"""

from decimal import Decimal

from ..models.checkout import DeliveryMethod, Invoice, InvoiceRow, OrderSnapshot, PayMode
from .pricing import PricingPolicy, DEFAULT_POLICY

PAY_MODE_LABELS = {
    PayMode.CARD: "Credit/Debit Card",
    PayMode.UPI: "UPI Payment",
    PayMode.NETBANKING: "Net Banking",
    PayMode.WALLET: "Digital Wallet",
}


def format_inr(value: Decimal) -> str:
    """₹1,180 for whole amounts, ₹1,180.50 otherwise; negatives as - ₹118"""
    sign = "- " if value < 0 else ""
    value = abs(value)
    if value == value.to_integral_value():
        return f"{sign}₹{int(value):,}"
    return f"{sign}₹{value:,.2f}"


def _percent_label(rate: Decimal) -> str:
    return f"{(rate * 100).normalize():f}%"


def delivery_label(delivery: DeliveryMethod) -> str:
    return "Standard" if delivery == DeliveryMethod.STANDARD else "Express"


def invoice_rows(order: OrderSnapshot, policy: PricingPolicy = DEFAULT_POLICY) -> list[InvoiceRow]:
    summary = order.summary
    rows = [
        InvoiceRow(label="Subtotal", value=summary.subtotal),
        InvoiceRow(label=f"SGST ({_percent_label(policy.sgst_rate)})", value=summary.sgst),
        InvoiceRow(label=f"CGST ({_percent_label(policy.cgst_rate)})", value=summary.cgst),
        InvoiceRow(label=f"Delivery ({delivery_label(order.delivery)})", value=summary.delivery_fee),
    ]
    if summary.promo_code and summary.promo_discount > 0:
        rows.append(
            InvoiceRow(
                label=f"Promo Discount ({summary.promo_code})",
                value=-summary.promo_discount,
            )
        )
    return rows


def build_invoice(order: OrderSnapshot, policy: PricingPolicy = DEFAULT_POLICY) -> Invoice:
    """Printable view of an order; reads only the frozen snapshot"""
    lines = [
        f"{item.name} x{item.quantity} @ {format_inr(item.unit_price)} = "
        f"{format_inr(item.unit_price * item.quantity)}"
        for item in order.items
    ]
    return Invoice(
        order_id=order.order_id,
        placed_at=order.placed_at,
        rows=invoice_rows(order, policy),
        total=format_inr(order.summary.total),
        payment_method=PAY_MODE_LABELS[order.pay_mode],
        delivery_type=f"{delivery_label(order.delivery)} Delivery",
        lines=lines,
    )
