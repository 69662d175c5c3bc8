"""Cart API routes for the pet shop"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from kungfu import Error

from ..core.errors import ErrorKind
from ..models.cart import (
    AddToCartRequest,
    CartLineView,
    CartResponse,
    ChangeQuantityRequest,
)
from ..models.checkout import DeliveryMethod
from ..database.products import ProductDatabase
from ..security.identity import get_session_id, require_user
from ..services.cart import CartRegistry, CartView
from ..services.pricing import (
    PricingPolicy,
    actual_savings,
    compute_breakdown,
    discount_percentage,
)
from ..services.promo import PromoService
from .deps import (
    get_cart_registry,
    get_pricing_policy,
    get_product_db,
    get_promo_service,
    raise_for,
)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def build_cart_response(
    view: CartView,
    promo_service: PromoService,
    session_id: str,
    products: ProductDatabase,
    policy: PricingPolicy,
    delivery: DeliveryMethod = DeliveryMethod.STANDARD,
    message: Optional[str] = None,
) -> CartResponse:
    """Lines annotated with catalog data, plus the live breakdown"""
    lines = view.lines
    pricing = products.get_pricing_map([line.product_id for line in lines])

    items = []
    for line in lines:
        details = pricing.get(line.product_id)
        items.append(
            CartLineView(
                line=line,
                line_total=line.line_total,
                original_price=details.old_price if details else None,
                discount_percentage=discount_percentage(details),
                rating=details.rating if details else 0.0,
            )
        )

    return CartResponse(
        items=items,
        item_count=len(items),
        breakdown=compute_breakdown(
            lines, delivery, promo_service.current(session_id), policy
        ),
        savings=actual_savings(lines, pricing),
        message=message,
    )


@router.get("", response_model=CartResponse)
async def get_cart(
    delivery: DeliveryMethod = Query(DeliveryMethod.STANDARD),
    user_id: str = Depends(require_user),
    session_id: str = Depends(get_session_id),
    registry: CartRegistry = Depends(get_cart_registry),
    promo_service: PromoService = Depends(get_promo_service),
    products: ProductDatabase = Depends(get_product_db),
    policy: PricingPolicy = Depends(get_pricing_policy),
):
    """Get the current user's cart"""
    view = await registry.view_for(user_id)

    # Reload so changes made elsewhere show up; mid-update the current lines are served
    match await view.load():
        case Error(e) if e.kind == ErrorKind.BUSY:
            pass
        case Error(_):
            raise HTTPException(status_code=502, detail=view.message)

    return build_cart_response(view, promo_service, session_id, products, policy, delivery)


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    user_id: str = Depends(require_user),
    session_id: str = Depends(get_session_id),
    registry: CartRegistry = Depends(get_cart_registry),
    promo_service: PromoService = Depends(get_promo_service),
    products: ProductDatabase = Depends(get_product_db),
    policy: PricingPolicy = Depends(get_pricing_policy),
):
    """Add one unit of a product to the cart"""
    product = products.get_product(request.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    view = await registry.view_for(user_id)
    match await view.add_product(product):
        case Error(e):
            raise_for(e)

    return build_cart_response(
        view, promo_service, session_id, products, policy, message=view.message
    )


@router.patch("/items/{line_id}", response_model=CartResponse)
async def change_quantity(
    line_id: str,
    request: ChangeQuantityRequest,
    delivery: DeliveryMethod = Query(DeliveryMethod.STANDARD),
    user_id: str = Depends(require_user),
    session_id: str = Depends(get_session_id),
    registry: CartRegistry = Depends(get_cart_registry),
    promo_service: PromoService = Depends(get_promo_service),
    products: ProductDatabase = Depends(get_product_db),
    policy: PricingPolicy = Depends(get_pricing_policy),
):
    """Step a line's quantity up or down by one"""
    view = await registry.view_for(user_id)
    match await view.change_quantity(line_id, request.delta):
        case Error(e):
            raise_for(e)

    return build_cart_response(
        view, promo_service, session_id, products, policy, delivery, message="Cart updated"
    )


@router.delete("/items/{line_id}", response_model=CartResponse)
async def remove_from_cart(
    line_id: str,
    delivery: DeliveryMethod = Query(DeliveryMethod.STANDARD),
    user_id: str = Depends(require_user),
    session_id: str = Depends(get_session_id),
    registry: CartRegistry = Depends(get_cart_registry),
    promo_service: PromoService = Depends(get_promo_service),
    products: ProductDatabase = Depends(get_product_db),
    policy: PricingPolicy = Depends(get_pricing_policy),
):
    """Remove a line from the cart"""
    view = await registry.view_for(user_id)
    match await view.remove_line(line_id):
        case Error(e):
            raise_for(e)

    return build_cart_response(
        view, promo_service, session_id, products, policy, delivery, message="Item removed"
    )
