import pytest
from fastapi.testclient import TestClient

from helpers import FlakyLedger
from petshop.core.session import InMemorySessionStore
from petshop.database.products import ProductDatabase
from petshop.models import Contact, ShippingAddress
from petshop.services.cart import CartRegistry, CartView
from petshop.services.promo import PromoService


@pytest.fixture
def ledger():
    return FlakyLedger()


@pytest.fixture
def products():
    return ProductDatabase()


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def promos(store):
    return PromoService(store)


@pytest.fixture
def view(ledger):
    return CartView("user-1", ledger)


@pytest.fixture
def contact():
    return Contact(email="asha@example.com", phone="9876543210")


@pytest.fixture
def address():
    return ShippingAddress(
        name="Asha Rao",
        line1="12 MG Road",
        city="Kolkata",
        state="WB",
        pincode="700001",
    )


@pytest.fixture
def client(ledger, store, products):
    """API client wired to fresh in-memory services"""
    from petshop.main import app
    from petshop.routes import deps

    registry = CartRegistry(ledger)
    promo_service = PromoService(store)

    app.dependency_overrides[deps.get_cart_registry] = lambda: registry
    app.dependency_overrides[deps.get_session_store] = lambda: store
    app.dependency_overrides[deps.get_promo_service] = lambda: promo_service
    app.dependency_overrides[deps.get_product_db] = lambda: products

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
