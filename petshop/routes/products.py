"""Product API routes for the pet shop"""

from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, HTTPException, Query, Depends

from ..models.product import (
    Product,
    ProductCategory,
    ProductFilters,
    ProductSearchResponse,
)
from ..database.products import ProductDatabase
from .deps import get_product_db

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductSearchResponse)
async def search_products(
    query: Optional[str] = Query(None, description="Search query"),
    category: Optional[ProductCategory] = Query(None, description="Filter by category"),
    tags: Optional[list[str]] = Query(None, description="Match any of these tags"),
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum price"),
    min_rating: Optional[float] = Query(None, ge=0, le=5, description="Minimum rating"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    products: ProductDatabase = Depends(get_product_db),
):
    """Search products in the catalog"""
    results, total = products.search_products(
        query=query,
        category=category,
        tags=tags,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        limit=limit,
        offset=offset,
    )

    return ProductSearchResponse(
        products=results,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/filters", response_model=ProductFilters)
async def list_filters(products: ProductDatabase = Depends(get_product_db)):
    """Category counts and tags for the catalog sidebar"""
    return products.list_filters()


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    products: ProductDatabase = Depends(get_product_db),
):
    """Get a product by ID"""
    product = products.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
