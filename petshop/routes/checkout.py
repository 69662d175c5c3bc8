"""Checkout API routes for the pet shop"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from kungfu import Ok, Error

from ..core.config import settings
from ..core.errors import ErrorKind, SIGN_IN_REQUIRED
from ..core.session import SessionStore
from ..models.checkout import (
    CheckoutReadiness,
    CheckoutRequest,
    CheckoutResponse,
    DeliveryMethod,
    Invoice,
    OrderSnapshot,
    PriceBreakdown,
)
from ..security.identity import get_current_user_id, get_session_id, require_session
from ..services.cart import CartRegistry
from ..services.checkout import CheckoutFlow, load_last_order
from ..services.invoice import build_invoice
from ..services.pricing import PricingPolicy
from ..services.promo import PromoService
from .deps import (
    get_cart_registry,
    get_pricing_policy,
    get_promo_service,
    get_session_store,
    raise_for,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


async def get_checkout_flow(
    user_id: Optional[str] = Depends(get_current_user_id),
    session_id: Optional[str] = Depends(get_session_id),
    registry: CartRegistry = Depends(get_cart_registry),
    promo_service: PromoService = Depends(get_promo_service),
    store: SessionStore = Depends(get_session_store),
    policy: PricingPolicy = Depends(get_pricing_policy),
) -> CheckoutFlow:
    view = await registry.view_for(user_id)
    return CheckoutFlow(
        session_id=session_id,
        cart=view,
        promos=promo_service,
        store=store,
        policy=policy,
        currency=settings.currency,
    )


@router.get("/quote", response_model=PriceBreakdown)
async def quote(
    delivery: DeliveryMethod = Query(DeliveryMethod.STANDARD),
    flow: CheckoutFlow = Depends(get_checkout_flow),
):
    """Price breakdown of the cart for the chosen delivery method"""
    return flow.breakdown(delivery)


@router.post("/validate", response_model=CheckoutReadiness)
async def validate_checkout(
    request: CheckoutRequest,
    flow: CheckoutFlow = Depends(get_checkout_flow),
):
    """Check the cart and form before placing the order"""
    if not flow.cart.user_id:
        raise_for(SIGN_IN_REQUIRED)
    return CheckoutReadiness(
        ready=flow.can_place(request.contact, request.address),
        problems=flow.problems(request.contact, request.address),
    )


@router.post("", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    flow: CheckoutFlow = Depends(get_checkout_flow),
):
    """
    Place an order.

    Payment is simulated: the selected pay mode is recorded, nothing is charged.
    On success the cart is empty and the order is the session's last order.
    """
    result = await flow.place_order(
        contact=request.contact,
        address=request.address,
        delivery=request.delivery,
        pay_mode=request.pay_mode,
    )

    match result:
        case Ok(order):
            return CheckoutResponse(success=True, state=flow.state, order=order)
        case Error(e) if e.kind in (ErrorKind.UNAUTHENTICATED, ErrorKind.BUSY):
            raise_for(e)
        case Error(e):
            logger.info(f"Checkout refused for session {flow.session_id}: {e.message}")
            return CheckoutResponse(success=False, state=flow.state, error_message=e.message)


@router.get("/last-order", response_model=OrderSnapshot)
async def get_last_order(
    session_id: str = Depends(require_session),
    store: SessionStore = Depends(get_session_store),
):
    """The most recent completed order of this session"""
    order = load_last_order(store, session_id)
    if not order:
        raise HTTPException(status_code=404, detail="No order found")
    return order


@router.get("/last-order/invoice", response_model=Invoice)
async def get_last_order_invoice(
    session_id: str = Depends(require_session),
    store: SessionStore = Depends(get_session_store),
    policy: PricingPolicy = Depends(get_pricing_policy),
):
    """Invoice of the most recent completed order"""
    order = load_last_order(store, session_id)
    if not order:
        raise HTTPException(status_code=404, detail="No order found")
    return build_invoice(order, policy)
