"""Product models for the pet shop catalog"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class ProductCategory(str, Enum):
    TOYS = "toys"
    DOGS = "dogs"
    CATS = "cats"
    BIRDS = "birds"


class Product(BaseModel):
    """Product in the catalog"""
    id: str
    name: str
    description: str = ""
    category: ProductCategory
    tags: list[str] = []
    old_price: Optional[Decimal] = Field(default=None, ge=0)
    discount_price: Decimal = Field(ge=0)
    rating: float = Field(default=0.0, ge=0, le=5)
    badge: Optional[str] = None
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class ProductPricing(BaseModel):
    """Catalog pricing used to annotate cart lines"""
    old_price: Optional[Decimal] = None
    discount_price: Decimal
    rating: float = 0.0


class ProductSearchResponse(BaseModel):
    """Response from product search"""
    products: list[Product]
    total: int
    limit: int
    offset: int


class CategoryCount(BaseModel):
    name: str
    count: int


class ProductFilters(BaseModel):
    """Facets offered by the catalog sidebar"""
    categories: list[CategoryCount]
    tags: list[str]
