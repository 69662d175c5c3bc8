"""Cart models for the pet shop"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from .checkout import PriceBreakdown

MAX_LINE_QUANTITY = 5


class CartLine(BaseModel):
    """One ledger row: a product a user intends to buy"""
    id: str
    user_id: str
    product_id: str
    name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1, le=MAX_LINE_QUANTITY)
    image_url: Optional[str] = None
    inserted_at: datetime

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class AddToCartRequest(BaseModel):
    """Request to add one unit of a product to the cart"""
    product_id: str


class ChangeQuantityRequest(BaseModel):
    """Request to step a line's quantity up or down"""
    delta: int = Field(ge=-1, le=1)


class CartLineView(BaseModel):
    """Cart line annotated with catalog data for display"""
    line: CartLine
    line_total: Decimal
    original_price: Optional[Decimal] = None
    discount_percentage: int = 0
    rating: float = 0.0


class CartResponse(BaseModel):
    """Cart API response"""
    items: list[CartLineView] = []
    item_count: int = 0
    breakdown: PriceBreakdown
    savings: Decimal = Decimal("0")
    message: Optional[str] = None

