"""Cart ledger storage"""

import uuid
import logging
from datetime import datetime, timezone
from typing import Optional, Protocol

from kungfu import Result, Ok, Error

from ..core.errors import ShopError, validation, not_found
from ..models.cart import CartLine, MAX_LINE_QUANTITY
from ..models.product import Product

logger = logging.getLogger(__name__)

LIMIT_REACHED = "Limit reached: Maximum 5 units allowed."


class CartLedger(Protocol):
    """
    Persisted cart rows, one per (user, product).

    Every call is scoped to user_id; a user can only see and change their own lines.
    """

    async def list_lines(self, user_id: str) -> Result[list[CartLine], ShopError]: ...

    async def upsert_line(
        self, user_id: str, product: Product, quantity_delta: int
    ) -> Result[CartLine, ShopError]: ...

    async def set_quantity(
        self, line_id: str, user_id: str, quantity: int
    ) -> Result[CartLine, ShopError]: ...

    async def delete_line(self, line_id: str, user_id: str) -> Result[None, ShopError]: ...

    async def clear_all(self, user_id: str) -> Result[None, ShopError]: ...


def quantity_error(quantity: int) -> Optional[ShopError]:
    """Error for a quantity outside [1, MAX_LINE_QUANTITY], None when valid"""
    if quantity > MAX_LINE_QUANTITY:
        return validation(LIMIT_REACHED)
    if quantity < 1:
        return validation("Quantity must be at least 1.")
    return None


class InMemoryCartLedger:
    """In-memory cart ledger"""

    def __init__(self):
        self.lines: dict[str, CartLine] = {}

    def _user_lines(self, user_id: str) -> list[CartLine]:
        return [line for line in self.lines.values() if line.user_id == user_id]

    async def list_lines(self, user_id: str) -> Result[list[CartLine], ShopError]:
        """Lines of a user, newest first"""
        lines = sorted(self._user_lines(user_id), key=lambda l: l.inserted_at, reverse=True)
        return Ok([line.model_copy() for line in lines])

    async def upsert_line(
        self,
        user_id: str,
        product: Product,
        quantity_delta: int = 1,
    ) -> Result[CartLine, ShopError]:
        """Add a product to the cart, or bump the quantity of its existing line"""
        existing = next(
            (line for line in self._user_lines(user_id) if line.product_id == product.id),
            None,
        )
        new_quantity = (existing.quantity if existing else 0) + quantity_delta

        error = quantity_error(new_quantity)
        if error:
            return Error(error)

        if existing:
            updated = existing.model_copy(update={"quantity": new_quantity})
        else:
            updated = CartLine(
                id=str(uuid.uuid4()),
                user_id=user_id,
                product_id=product.id,
                name=product.name,
                unit_price=product.discount_price,
                quantity=new_quantity,
                image_url=product.image_url,
                inserted_at=datetime.now(timezone.utc),
            )
        self.lines[updated.id] = updated
        return Ok(updated.model_copy())

    async def set_quantity(
        self,
        line_id: str,
        user_id: str,
        quantity: int,
    ) -> Result[CartLine, ShopError]:
        """Overwrite the quantity of a line"""
        line = self.lines.get(line_id)
        if not line or line.user_id != user_id:
            return Error(not_found("Item not in cart"))

        error = quantity_error(quantity)
        if error:
            return Error(error)

        updated = line.model_copy(update={"quantity": quantity})
        self.lines[line_id] = updated
        return Ok(updated.model_copy())

    async def delete_line(self, line_id: str, user_id: str) -> Result[None, ShopError]:
        """Remove a line from the cart"""
        line = self.lines.get(line_id)
        if not line or line.user_id != user_id:
            return Error(not_found("Item not in cart"))
        del self.lines[line_id]
        return Ok(None)

    async def clear_all(self, user_id: str) -> Result[None, ShopError]:
        """Remove every line of a user"""
        for line in self._user_lines(user_id):
            del self.lines[line.id]
        logger.debug(f"Cleared cart of user {user_id}")
        return Ok(None)


# Singleton instance
cart_ledger = InMemoryCartLedger()
