# Database modules

from .products import product_db, ProductDatabase
from .carts import cart_ledger, CartLedger, InMemoryCartLedger
from .rest import RestCartLedger

__all__ = [
    "product_db",
    "ProductDatabase",
    "cart_ledger",
    "CartLedger",
    "InMemoryCartLedger",
    "RestCartLedger",
]
