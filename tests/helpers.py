"""Result helpers, cart line factory and a ledger that fails on demand"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from kungfu import Ok, Error

from petshop.core.errors import persistence
from petshop.database.carts import InMemoryCartLedger
from petshop.models import CartLine


def unwrap(result):
    """Value of an Ok result; fails the test on Error"""
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise AssertionError(f"expected Ok, got Error({e!r})")


def unwrap_error(result):
    """Error of an Error result; fails the test on Ok"""
    match result:
        case Error(e):
            return e
        case Ok(value):
            raise AssertionError(f"expected Error, got Ok({value!r})")


def run(coro):
    return asyncio.run(coro)


def make_line(price, quantity, line_id="line-1", product_id="prod-001", user_id="user-1", age=0):
    return CartLine(
        id=line_id,
        user_id=user_id,
        product_id=product_id,
        name=f"Item {line_id}",
        unit_price=Decimal(str(price)),
        quantity=quantity,
        inserted_at=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=age),
    )


class FlakyLedger(InMemoryCartLedger):
    """In-memory ledger whose named operations fail on demand"""

    def __init__(self):
        super().__init__()
        self.failing: set[str] = set()

    def _fails(self, name):
        return name in self.failing

    async def list_lines(self, user_id):
        if self._fails("list_lines"):
            return Error(persistence("Cart service error (503)."))
        return await super().list_lines(user_id)

    async def upsert_line(self, user_id, product, quantity_delta=1):
        if self._fails("upsert_line"):
            return Error(persistence("Cart service error (503)."))
        return await super().upsert_line(user_id, product, quantity_delta)

    async def set_quantity(self, line_id, user_id, quantity):
        if self._fails("set_quantity"):
            return Error(persistence("Cart service error (503)."))
        return await super().set_quantity(line_id, user_id, quantity)

    async def delete_line(self, line_id, user_id):
        if self._fails("delete_line"):
            return Error(persistence("Cart service error (503)."))
        return await super().delete_line(line_id, user_id)

    async def clear_all(self, user_id):
        if self._fails("clear_all"):
            return Error(persistence("Cart service error (503)."))
        return await super().clear_all(user_id)

