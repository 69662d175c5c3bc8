"""Shared service instances for the API routes"""

import logging
from typing import NoReturn, Optional

from fastapi import HTTPException

from ..core.config import settings
from ..core.errors import ShopError
from ..core.session import SessionStore, session_store
from ..database.carts import CartLedger, cart_ledger
from ..database.products import ProductDatabase, product_db
from ..database.rest import RestCartLedger
from ..services.cart import CartRegistry
from ..services.pricing import PricingPolicy
from ..services.promo import PromoService

logger = logging.getLogger(__name__)

# Initialized on first use (overridable in tests)
ledger: Optional[CartLedger] = None
cart_registry: Optional[CartRegistry] = None
promo_service: Optional[PromoService] = None


def get_ledger() -> CartLedger:
    """Get or create the cart ledger selected by settings"""
    global ledger
    if ledger is None:
        if settings.ledger_backend == "rest" and settings.rest_backend_configured:
            ledger = RestCartLedger(
                base_url=settings.backend_url,
                api_key=settings.backend_api_key,
                timeout=settings.backend_timeout,
            )
            logger.info(f"Using hosted cart ledger at {settings.backend_url}")
        else:
            if settings.ledger_backend == "rest":
                logger.warning("Hosted backend not configured - falling back to in-memory cart ledger")
            ledger = cart_ledger
    return ledger


def get_cart_registry() -> CartRegistry:
    global cart_registry
    if cart_registry is None:
        cart_registry = CartRegistry(get_ledger())
    return cart_registry


def get_session_store() -> SessionStore:
    return session_store


def get_promo_service() -> PromoService:
    global promo_service
    if promo_service is None:
        promo_service = PromoService(get_session_store())
    return promo_service


def get_product_db() -> ProductDatabase:
    return product_db


def get_pricing_policy() -> PricingPolicy:
    return PricingPolicy.from_settings(settings)


def raise_for(error: ShopError) -> NoReturn:
    """Translate a service error into an HTTP error"""
    raise HTTPException(status_code=error.status_code, detail=error.message)
