"""Cart view with quantity limits and optimistic updates"""

import logging
from datetime import datetime, timezone
from typing import Optional

from kungfu import Result, Ok, Error

from ..core.errors import ShopError, SIGN_IN_REQUIRED, BUSY, validation, not_found
from ..database.carts import CartLedger, LIMIT_REACHED
from ..models.cart import CartLine, MAX_LINE_QUANTITY
from ..models.product import Product
from .transactional import Transactional

logger = logging.getLogger(__name__)


def _replace_line(lines: list[CartLine], updated: CartLine) -> list[CartLine]:
    return [updated if line.id == updated.id else line for line in lines]


class CartView:
    """
    A user's cart as last loaded from the ledger.

    Quantity changes and removals show up in lines immediately and are put
    back if the ledger refuses them. Only one mutation may be in flight.
    """

    def __init__(
        self,
        user_id: Optional[str],
        ledger: CartLedger,
        max_quantity: int = MAX_LINE_QUANTITY,
    ):
        self.user_id = user_id
        self.ledger = ledger
        self.max_quantity = max_quantity
        self.busy = False
        self.loaded = False
        self.message: Optional[str] = None
        self._lines: Transactional[list[CartLine]] = Transactional([])

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.value)

    def find(self, line_id: str) -> Optional[CartLine]:
        return next((line for line in self._lines.value if line.id == line_id), None)

    def _guard(self) -> Optional[ShopError]:
        if not self.user_id:
            return SIGN_IN_REQUIRED
        if self.busy:
            return BUSY
        return None

    async def load(self) -> Result[list[CartLine], ShopError]:
        """
        Replace the view with the ledger's lines.

        Refused with BUSY while a mutation is in flight; its rollback would
        otherwise overwrite the freshly loaded lines.
        """
        if not self.user_id:
            self.message = SIGN_IN_REQUIRED.message
            return Error(SIGN_IN_REQUIRED)
        if self.busy:
            return Error(BUSY)

        result = await self.ledger.list_lines(self.user_id)
        match result:
            case Ok(lines):
                self._lines.value = list(lines)
                self.loaded = True
                self.message = None
            case Error(e):
                logger.error(f"Failed to load cart for {self.user_id}: {e.message}")
                self.message = "Could not load your cart."
        return result

    async def add_product(self, product: Product) -> Result[CartLine, ShopError]:
        """Add one unit of product, bumping its line if it is already in the cart"""
        error = self._guard()
        if error:
            return Error(error)

        existing = next(
            (line for line in self._lines.value if line.product_id == product.id),
            None,
        )
        if existing and existing.quantity >= self.max_quantity:
            self.message = LIMIT_REACHED
            return Error(validation(LIMIT_REACHED))

        self.busy = True
        try:
            result = await self.ledger.upsert_line(self.user_id, product, 1)
        finally:
            self.busy = False

        match result:
            case Ok(line):
                if existing:
                    self._lines.value = _replace_line(self._lines.value, line)
                    self.message = "Updated quantity in Cart"
                else:
                    self._lines.value = [line] + self._lines.value
                    self.message = "Added to Cart"
            case Error(e):
                logger.error(f"Failed to add {product.id} to cart: {e.message}")
                self.message = e.message
        return result

    async def change_quantity(self, line_id: str, delta: int) -> Result[CartLine, ShopError]:
        """Step a line's quantity; it never drops below 1 or rises above the limit"""
        error = self._guard()
        if error:
            return Error(error)

        line = self.find(line_id)
        if line is None:
            return Error(not_found("Item not in cart"))

        next_quantity = max(1, line.quantity + delta)
        if next_quantity > self.max_quantity:
            message = f'You can not add more than {self.max_quantity} units of "{line.name}"'
            self.message = message
            return Error(validation(message))
        if next_quantity == line.quantity:
            return Ok(line)

        self.busy = True
        try:
            result = await self._lines.run(
                change=lambda lines: _replace_line(
                    lines, line.model_copy(update={"quantity": next_quantity})
                ),
                commit=lambda: self.ledger.set_quantity(line_id, self.user_id, next_quantity),
                reconcile=_replace_line,
            )
        finally:
            self.busy = False

        match result:
            case Ok(_):
                self.message = None
            case Error(e):
                logger.error(f"Failed to update quantity of {line_id}: {e.message}")
                self.message = "Failed to update quantity"
        return result

    async def remove_line(self, line_id: str) -> Result[None, ShopError]:
        """Remove a line"""
        error = self._guard()
        if error:
            return Error(error)

        if self.find(line_id) is None:
            return Error(not_found("Item not in cart"))

        self.busy = True
        try:
            result = await self._lines.run(
                change=lambda lines: [l for l in lines if l.id != line_id],
                commit=lambda: self.ledger.delete_line(line_id, self.user_id),
            )
        finally:
            self.busy = False

        match result:
            case Ok(_):
                self.message = None
            case Error(e):
                logger.error(f"Failed to remove {line_id}: {e.message}")
                self.message = "Failed to remove item."
        return result

    async def clear(self) -> Result[None, ShopError]:
        """Empty the cart once the ledger confirms; nothing changes locally before that"""
        error = self._guard()
        if error:
            return Error(error)

        self.busy = True
        try:
            result = await self.ledger.clear_all(self.user_id)
        finally:
            self.busy = False

        match result:
            case Ok(_):
                self._lines.value = []
            case Error(e):
                logger.error(f"Failed to clear cart of {self.user_id}: {e.message}")
        return result


class CartRegistry:
    """One cart view per signed-in user"""

    def __init__(self, ledger: CartLedger):
        self.ledger = ledger
        self.views: dict[str, CartView] = {}
        self.last_used: dict[str, datetime] = {}

    async def view_for(self, user_id: Optional[str]) -> CartView:
        """The user's view, loaded from the ledger on first use"""
        if not user_id:
            return CartView(None, self.ledger)

        view = self.views.get(user_id)
        if view is None:
            view = CartView(user_id, self.ledger)
            self.views[user_id] = view
        self.last_used[user_id] = datetime.now(timezone.utc)
        if not view.loaded:
            await view.load()
        return view

    def prune(self, max_age_hours: int = 24, now: Optional[datetime] = None) -> int:
        """Drop views not used for max_age_hours; busy views are kept"""
        now = now or datetime.now(timezone.utc)
        idle = [
            user_id for user_id, used in self.last_used.items()
            if (now - used).total_seconds() > max_age_hours * 3600
            and not self.views[user_id].busy
        ]
        for user_id in idle:
            del self.views[user_id]
            del self.last_used[user_id]
        if idle:
            logger.debug(f"Pruned {len(idle)} idle cart views")
        return len(idle)
