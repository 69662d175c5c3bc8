"""
Unit tests for the product catalog and the session store.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from petshop.core.session import InMemorySessionStore
from petshop.models import ProductCategory


class TestSearchProducts:
    """Tests for ProductDatabase.search_products."""

    def test_all(self, products):
        results, total = products.search_products()

        assert total == 8
        assert len(results) == 8

    def test_query_matches_name_or_description(self, products):
        results, _ = products.search_products(query="FOOD")

        assert {p.id for p in results} == {"prod-006", "prod-007"}

    def test_category(self, products):
        results, _ = products.search_products(category=ProductCategory.CATS)

        assert {p.id for p in results} == {"prod-007", "prod-008"}

    def test_tags_match_any(self, products):
        results, _ = products.search_products(tags=["CHEW", "seeds"])

        assert {p.id for p in results} == {"prod-001", "prod-004", "prod-006"}

    def test_price_range_uses_selling_price(self, products):
        cheap, _ = products.search_products(max_price=Decimal("250"))
        pricey, _ = products.search_products(min_price=Decimal("700"))

        assert {p.id for p in cheap} == {"prod-001", "prod-008"}
        assert {p.id for p in pricey} == {"prod-003", "prod-004", "prod-005", "prod-007"}

    def test_min_rating(self, products):
        results, _ = products.search_products(min_rating=5)

        assert [p.id for p in results] == ["prod-006"]

    def test_pagination(self, products):
        results, total = products.search_products(limit=3, offset=6)

        assert total == 8
        assert len(results) == 2


class TestCatalogReads:
    """Tests for pricing lookups and filters."""

    def test_pricing(self, products):
        pricing = products.get_product_pricing("prod-003")

        assert pricing.old_price == Decimal("980")
        assert pricing.discount_price == Decimal("790")
        assert pricing.rating == 4

    def test_pricing_without_old_price(self, products):
        assert products.get_product_pricing("prod-008").old_price is None

    def test_unknown_product(self, products):
        assert products.get_product("prod-999") is None
        assert products.get_product_pricing("prod-999") is None
        assert set(products.get_pricing_map(["prod-001", "prod-999"])) == {"prod-001"}

    def test_filters(self, products):
        filters = products.list_filters()

        assert [(c.name, c.count) for c in filters.categories] == [
            ("birds", 1),
            ("cats", 2),
            ("dogs", 2),
            ("toys", 3),
        ]
        assert filters.tags == sorted(filters.tags)
        assert {"chew", "food", "catnip"} <= set(filters.tags)


class TestInMemorySessionStore:
    """Tests for InMemorySessionStore."""

    def test_set_get_delete(self):
        store = InMemorySessionStore()

        store.set("s1", "applied_promo_code", "WELCOME10")
        assert store.get("s1", "applied_promo_code") == "WELCOME10"
        assert store.get("s2", "applied_promo_code") is None

        store.delete("s1", "applied_promo_code")
        assert store.get("s1", "applied_promo_code") is None

    def test_delete_unknown_session(self):
        InMemorySessionStore().delete("missing", "last_order")

    def test_cleanup_old_sessions(self):
        store = InMemorySessionStore()
        store.set("old", "last_order", "{}")
        store.set("fresh", "last_order", "{}")
        store.sessions["old"].updated_at = datetime.now(timezone.utc) - timedelta(hours=48)

        assert store.cleanup_old_sessions(max_age_hours=24) == 1
        assert set(store.sessions) == {"fresh"}
