"""Pet shop product catalog"""

from decimal import Decimal
from typing import Optional
from ..models.product import (
    Product,
    ProductCategory,
    ProductPricing,
    ProductFilters,
    CategoryCount,
)

# Seed catalog
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Rubber Dumbbell Toy",
        description="Durable natural rubber dumbbell for fetch and chewing.",
        category=ProductCategory.TOYS,
        tags=["chew", "fetch", "rubber"],
        old_price=Decimal("240"),
        discount_price=Decimal("210"),
        rating=4,
        badge="SALE",
        image_url="/images/products/rubbertoy1.jpg",
    ),
    "prod-002": Product(
        id="prod-002",
        name="Pet Tags",
        description="Engraved stainless steel ID tags with split ring.",
        category=ProductCategory.TOYS,
        tags=["accessories", "id"],
        old_price=Decimal("680"),
        discount_price=Decimal("630"),
        rating=4,
        image_url="/images/products/pettags1.jpg",
    ),
    "prod-003": Product(
        id="prod-003",
        name="Collar Belt",
        description="Adjustable padded nylon collar with quick-release buckle.",
        category=ProductCategory.DOGS,
        tags=["accessories", "walk"],
        old_price=Decimal("980"),
        discount_price=Decimal("790"),
        rating=4,
        badge="HOT SALE",
        image_url="/images/products/collar1.jpg",
    ),
    "prod-004": Product(
        id="prod-004",
        name="Chew Toy",
        description="Textured chew toy that cleans teeth while playing.",
        category=ProductCategory.TOYS,
        tags=["chew", "dental"],
        old_price=Decimal("750"),
        discount_price=Decimal("720"),
        rating=4,
        image_url="/images/products/chewtoy1.jpg",
    ),
    "prod-005": Product(
        id="prod-005",
        name="Dog Bone Chicken",
        description="Chicken-flavoured pressed bone treat for medium dogs.",
        category=ProductCategory.DOGS,
        tags=["treats", "chicken"],
        old_price=Decimal("860"),
        discount_price=Decimal("790"),
        rating=3,
        image_url="/images/products/dogbone1.jpg",
    ),
    "prod-006": Product(
        id="prod-006",
        name="Bird Food Mixture",
        description="Seed and grain mix for budgies, finches and lovebirds.",
        category=ProductCategory.BIRDS,
        tags=["food", "seeds"],
        old_price=Decimal("670"),
        discount_price=Decimal("540"),
        rating=5,
        badge="LIMITED",
        image_url="/images/products/birdfood1.jpg",
    ),
    "prod-007": Product(
        id="prod-007",
        name="Cat Food",
        description="Complete dry food for adult cats with real fish.",
        category=ProductCategory.CATS,
        tags=["food", "fish"],
        old_price=Decimal("890"),
        discount_price=Decimal("780"),
        rating=4,
        image_url="/images/products/catfood1.jpg",
    ),
    "prod-008": Product(
        id="prod-008",
        name="Catnip Mouse",
        description="Plush mouse filled with organic catnip.",
        category=ProductCategory.CATS,
        tags=["catnip", "plush"],
        discount_price=Decimal("199"),
        rating=0,
        image_url="/images/products/catnip1.jpg",
    ),
}


class ProductDatabase:
    """In-memory product catalog"""

    def __init__(self, products: Optional[dict[str, Product]] = None):
        self.products = dict(products if products is not None else PRODUCTS)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def get_product_pricing(self, product_id: str) -> Optional[ProductPricing]:
        """Get the catalog prices and rating of a product"""
        product = self.products.get(product_id)
        if not product:
            return None
        return ProductPricing(
            old_price=product.old_price,
            discount_price=product.discount_price,
            rating=product.rating,
        )

    def get_pricing_map(self, product_ids: list[str]) -> dict[str, ProductPricing]:
        """Pricing for every known product among product_ids"""
        result = {}
        for product_id in product_ids:
            pricing = self.get_product_pricing(product_id)
            if pricing is not None:
                result[product_id] = pricing
        return result

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[ProductCategory] = None,
        tags: Optional[list[str]] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_rating: Optional[float] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        A product matches the tag filter when it carries any of the given tags.

        Returns:
            Tuple of (matching products, total count)
        """
        results = list(self.products.values())

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.description.lower()
            ]

        if category:
            results = [p for p in results if p.category == category]

        if tags:
            wanted = {t.strip().lower() for t in tags}
            results = [p for p in results if wanted & {t.lower() for t in p.tags}]

        # Price filters apply to the selling price
        if min_price is not None:
            results = [p for p in results if p.discount_price >= min_price]
        if max_price is not None:
            results = [p for p in results if p.discount_price <= max_price]

        if min_rating is not None:
            results = [p for p in results if p.rating >= min_rating]

        total = len(results)
        results = results[offset : offset + limit]

        return results, total

    def list_filters(self) -> ProductFilters:
        """Category counts and the sorted set of tags"""
        counts: dict[str, int] = {}
        tags: set[str] = set()
        for product in self.products.values():
            name = product.category.value.strip().lower()
            counts[name] = counts.get(name, 0) + 1
            tags.update(t.strip() for t in product.tags)

        categories = [
            CategoryCount(name=name, count=count)
            for name, count in sorted(counts.items())
        ]
        return ProductFilters(categories=categories, tags=sorted(tags))


# Singleton instance
product_db = ProductDatabase()
