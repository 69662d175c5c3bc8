# Services

from .pricing import compute_breakdown, PricingPolicy, discount_percentage, actual_savings
from .promo import resolve_promo, PromoService
from .transactional import Transactional
from .cart import CartView, CartRegistry
from .checkout import CheckoutFlow, build_snapshot, generate_order_id, load_last_order
from .invoice import build_invoice, format_inr

__all__ = [
    "compute_breakdown",
    "PricingPolicy",
    "discount_percentage",
    "actual_savings",
    "resolve_promo",
    "PromoService",
    "Transactional",
    "CartView",
    "CartRegistry",
    "CheckoutFlow",
    "build_snapshot",
    "generate_order_id",
    "load_last_order",
    "build_invoice",
    "format_inr",
]
