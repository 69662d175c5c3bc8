"""
Pet Shop Checkout Service

Cart, promo and checkout API of the Poshik pet shop. Persistence and
authentication live in the hosted backend; this service prices carts and
freezes orders.
"""

import os
import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import settings
from .routes import products_router, cart_router, promo_router, checkout_router
from .routes import deps

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def sweep_idle_state():
    """Periodically drop idle sessions and cart views"""
    while True:
        await asyncio.sleep(settings.session_cleanup_interval)
        sessions = deps.get_session_store().cleanup_old_sessions(settings.session_max_age_hours)
        views = deps.get_cart_registry().prune(settings.session_max_age_hours)
        if sessions or views:
            logger.info(f"Cleaned up {sessions} idle sessions and {views} cart views")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Cart ledger backend: {settings.ledger_backend}")
    logger.info(f"Hosted backend configured: {settings.rest_backend_configured}")
    sweeper = asyncio.create_task(sweep_idle_state())

    yield

    logger.info(f"{settings.app_name} shutting down...")
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper
    close = getattr(deps.ledger, "close", None)
    if close is not None:
        await close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Cart pricing and checkout for the pet shop",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(promo_router)
app.include_router(checkout_router)


@app.get("/")
async def home():
    """Service index"""
    return {
        "message": f"{settings.app_name} API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/cart",
            "promo": "/api/promo",
            "checkout": "/api/checkout",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "petshop-checkout",
        "ledger_backend": settings.ledger_backend,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "petshop.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
