"""
Unit tests for promo code resolution and the session promo.
"""

from decimal import Decimal

import pytest

from helpers import unwrap, unwrap_error
from petshop.core.session import PROMO_KEY
from petshop.models import PromoRejection, PromoRule
from petshop.services.promo import PromoService, resolve_promo


class TestResolvePromo:
    """Tests for resolve_promo."""

    @pytest.mark.parametrize("code", ["WELCOME10", "welcome10", "  Welcome10 ", "\tWELCOME10\n"])
    def test_known_code_in_any_case(self, code):
        promo = unwrap(resolve_promo(code))

        assert promo.code == "WELCOME10"
        assert promo.rule.rate == Decimal("0.1")

    @pytest.mark.parametrize("code", ["", "   ", None])
    def test_empty_input(self, code):
        assert unwrap_error(resolve_promo(code)) == PromoRejection.EMPTY

    @pytest.mark.parametrize("code", ["WELCOME", "WELCOME100", "SUMMER50"])
    def test_unknown_code(self, code):
        assert unwrap_error(resolve_promo(code)) == PromoRejection.UNKNOWN

    def test_same_input_same_answer(self):
        first = unwrap(resolve_promo(" welcome10"))
        second = unwrap(resolve_promo(" welcome10"))

        assert first == second

    def test_custom_table(self):
        table = {"PAWS20": PromoRule(percent=Decimal("20"))}

        assert unwrap(resolve_promo("paws20", table)).rule.percent == Decimal("20")
        assert unwrap_error(resolve_promo("WELCOME10", table)) == PromoRejection.UNKNOWN


class TestPromoService:
    """Tests for the per-session applied promo."""

    def test_apply_stores_normalized_code(self, promos, store):
        unwrap(promos.apply("s1", " welcome10 "))

        assert store.get("s1", PROMO_KEY) == "WELCOME10"
        assert promos.current("s1").code == "WELCOME10"

    def test_rejected_code_keeps_previous_promo(self, promos):
        unwrap(promos.apply("s1", "WELCOME10"))

        assert unwrap_error(promos.apply("s1", "NOPE")) == PromoRejection.UNKNOWN
        assert promos.current("s1").code == "WELCOME10"

    def test_apply_replaces_instead_of_stacking(self, store):
        table = {
            "WELCOME10": PromoRule(percent=Decimal("10")),
            "PAWS20": PromoRule(percent=Decimal("20")),
        }
        promos = PromoService(store, table)

        unwrap(promos.apply("s1", "WELCOME10"))
        unwrap(promos.apply("s1", "PAWS20"))

        assert promos.current("s1").code == "PAWS20"

    def test_remove(self, promos):
        unwrap(promos.apply("s1", "WELCOME10"))
        promos.remove("s1")

        assert promos.current("s1") is None

    def test_sessions_are_separate(self, promos):
        unwrap(promos.apply("s1", "WELCOME10"))

        assert promos.current("s2") is None

    def test_tampered_stored_code_is_ignored(self, promos, store):
        store.set("s1", PROMO_KEY, "FREE100")

        assert promos.current("s1") is None
