"""
Hosted Cart Ledger

Cart ledger backed by the hosted backend's PostgREST interface.
Row-level isolation between users is enforced by the backend's policies;
every request still filters on user_id.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional, Any

import httpx
from kungfu import Result, Ok, Error

from ..core.errors import ShopError, persistence, not_found
from ..models.cart import CartLine
from ..models.product import Product
from .carts import quantity_error

logger = logging.getLogger(__name__)

TABLE_NAME = "cart"


def line_from_row(row: dict[str, Any]) -> CartLine:
    """Convert a backend row to a CartLine"""
    return CartLine(
        id=str(row["id"]),
        user_id=row["user_id"],
        product_id=str(row["product_id"]),
        name=row["name"],
        unit_price=row.get("price") or 0,
        quantity=row["quantity"],
        image_url=row.get("image_url"),
        inserted_at=row["inserted_at"],
    )


class RestCartLedger:
    """
    Cart ledger talking to a PostgREST endpoint.

    Failures of the backend are returned as PERSISTENCE errors; nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize ledger client.

        Args:
            base_url: Base URL of the hosted backend
            api_key: Key sent as apikey and bearer token
            timeout: Request timeout in seconds
            transport: Optional transport override
        """
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Prefer": "return=representation",
        }

    async def _request(
        self,
        method: str,
        params: dict[str, str],
        body: Optional[dict] = None,
    ) -> Result[list[dict[str, Any]], ShopError]:
        """Make a request against the cart table"""
        url = f"{self.base_url}/rest/v1/{TABLE_NAME}"
        content = json.dumps(body) if body is not None else None

        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                params=params,
                headers=self._headers(),
                content=content,
            )
        except httpx.HTTPError as e:
            logger.error(f"Cart backend unreachable: {e}")
            return Error(persistence("Could not reach the cart service."))

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            return Error(persistence(f"Cart service error ({response.status_code})."))

        if not response.content:
            return Ok([])
        return Ok(response.json())

    async def list_lines(self, user_id: str) -> Result[list[CartLine], ShopError]:
        """Lines of a user, newest first"""
        result = await self._request(
            "GET",
            {"select": "*", "user_id": f"eq.{user_id}", "order": "inserted_at.desc"},
        )
        match result:
            case Ok(rows):
                return Ok([line_from_row(row) for row in rows])
            case Error(e):
                return Error(e)

    async def upsert_line(
        self,
        user_id: str,
        product: Product,
        quantity_delta: int = 1,
    ) -> Result[CartLine, ShopError]:
        """Add a product to the cart, or bump the quantity of its existing line"""
        lookup = await self._request(
            "GET",
            {
                "select": "id,quantity",
                "user_id": f"eq.{user_id}",
                "product_id": f"eq.{product.id}",
            },
        )
        match lookup:
            case Error(e):
                return Error(e)
            case Ok(rows):
                existing = rows[0] if rows else None

        if existing:
            return await self.set_quantity(
                str(existing["id"]), user_id, existing["quantity"] + quantity_delta
            )

        error = quantity_error(quantity_delta)
        if error:
            return Error(error)

        payload = {
            "user_id": user_id,
            "product_id": product.id,
            "name": product.name,
            "price": str(product.discount_price),
            "quantity": quantity_delta,
            "image_url": product.image_url,
            "inserted_at": datetime.now(timezone.utc).isoformat(),
        }
        inserted = await self._request("POST", {}, body=payload)
        return self._single(inserted)

    async def set_quantity(
        self,
        line_id: str,
        user_id: str,
        quantity: int,
    ) -> Result[CartLine, ShopError]:
        """Overwrite the quantity of a line"""
        error = quantity_error(quantity)
        if error:
            return Error(error)

        updated = await self._request(
            "PATCH",
            {"id": f"eq.{line_id}", "user_id": f"eq.{user_id}"},
            body={"quantity": quantity},
        )
        return self._single(updated)

    async def delete_line(self, line_id: str, user_id: str) -> Result[None, ShopError]:
        """Remove a line from the cart"""
        result = await self._request(
            "DELETE",
            {"id": f"eq.{line_id}", "user_id": f"eq.{user_id}"},
        )
        match result:
            case Ok(_):
                return Ok(None)
            case Error(e):
                return Error(e)

    async def clear_all(self, user_id: str) -> Result[None, ShopError]:
        """Remove every line of a user"""
        result = await self._request("DELETE", {"user_id": f"eq.{user_id}"})
        match result:
            case Ok(_):
                return Ok(None)
            case Error(e):
                return Error(e)

    @staticmethod
    def _single(result: Result[list[dict[str, Any]], ShopError]) -> Result[CartLine, ShopError]:
        match result:
            case Ok([row, *_]):
                return Ok(line_from_row(row))
            case Ok(_):
                return Error(not_found("Item not in cart"))
            case Error(e):
                return Error(e)
