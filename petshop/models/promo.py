"""Promo code models"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class PromoRejection(str, Enum):
    """Why a submitted code did not resolve"""
    EMPTY = "empty"
    UNKNOWN = "unknown"


class PromoRule(BaseModel):
    """Percentage discount applied to subtotal plus tax"""
    percent: Decimal = Field(gt=0, le=100)
    description: str = ""

    class Config:
        frozen = True

    @property
    def rate(self) -> Decimal:
        return self.percent / Decimal("100")


class PromoCode(BaseModel):
    """A resolved promo code"""
    code: str
    rule: PromoRule

    class Config:
        frozen = True


class ApplyPromoRequest(BaseModel):
    code: str = ""


class PromoResponse(BaseModel):
    """Promo API response"""
    applied: Optional[PromoCode] = None
    message: Optional[str] = None
