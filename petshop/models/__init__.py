# Pet Shop Models

from .product import (
    Product,
    ProductCategory,
    ProductPricing,
    ProductSearchResponse,
    ProductFilters,
    CategoryCount,
)
from .cart import (
    CartLine,
    CartLineView,
    AddToCartRequest,
    ChangeQuantityRequest,
    CartResponse,
    MAX_LINE_QUANTITY,
)
from .promo import PromoCode, PromoRule, PromoRejection, ApplyPromoRequest, PromoResponse
from .checkout import (
    Contact,
    ShippingAddress,
    DeliveryMethod,
    PayMode,
    PriceBreakdown,
    OrderItem,
    OrderSnapshot,
    CheckoutState,
    CheckoutRequest,
    CheckoutResponse,
    CheckoutReadiness,
    Invoice,
    InvoiceRow,
)

__all__ = [
    "Product",
    "ProductCategory",
    "ProductPricing",
    "ProductSearchResponse",
    "ProductFilters",
    "CategoryCount",
    "CartLine",
    "CartLineView",
    "AddToCartRequest",
    "ChangeQuantityRequest",
    "CartResponse",
    "MAX_LINE_QUANTITY",
    "PromoCode",
    "PromoRule",
    "PromoRejection",
    "ApplyPromoRequest",
    "PromoResponse",
    "Contact",
    "ShippingAddress",
    "DeliveryMethod",
    "PayMode",
    "PriceBreakdown",
    "OrderItem",
    "OrderSnapshot",
    "CheckoutState",
    "CheckoutRequest",
    "CheckoutResponse",
    "CheckoutReadiness",
    "Invoice",
    "InvoiceRow",
]
