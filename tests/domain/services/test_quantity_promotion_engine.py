"""
Unit Tests for Quantity Promotion Engine
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from app.domain.models import QuantityPromotion


class TestQuantityPromotionEngine:

    @pytest.mark.parametrize("required, label", [(2, "2x1"), (3, "3x2"), (4, "4x3"), (5, "Promo"), (0, "Promo")])
    def test_labels(self, quantity_engine, required, label):
        assert quantity_engine.label(required) == label

    @pytest.mark.parametrize("required", [0, 1, None])
    def test_needs_at_least_two(self, quantity_engine, monday, required):
        promo = QuantityPromotion(required_quantity=required)
        assert not quantity_engine.is_active(promo, monday)

    def test_active_without_window(self, quantity_engine, monday):
        assert quantity_engine.is_active(QuantityPromotion(required_quantity=2), monday)

    def test_end_day_is_fully_included(self, quantity_engine):
        promo = QuantityPromotion(
            required_quantity=3,
            start_date=date(2026, 10, 1),
            end_date=date(2026, 10, 19),
        )

        assert quantity_engine.is_active(promo, datetime(2026, 10, 19, 20, 30))
        assert not quantity_engine.is_active(promo, date(2026, 10, 20))

    def test_not_started(self, quantity_engine, monday):
        promo = QuantityPromotion(required_quantity=2, start_date=date(2026, 11, 1))
        assert not quantity_engine.is_active(promo, monday)

    @pytest.mark.parametrize(
        "required, total, free",
        [
            (2, 1, 0),
            (2, 2, 1),
            (2, 5, 2),
            (3, 7, 2),
            (4, 4, 1),
            (4, 3, 0),
        ],
    )
    def test_free_units(self, quantity_engine, monday, required, total, free):
        promo = QuantityPromotion(required_quantity=required)
        assert quantity_engine.free_units(promo, Decimal(total), monday) == free

    def test_free_units_inactive(self, quantity_engine, monday):
        promo = QuantityPromotion(required_quantity=2, end_date=date(2026, 10, 1))
        assert quantity_engine.free_units(promo, Decimal('6'), monday) == 0

    def test_zero_quantity(self, quantity_engine, monday):
        assert quantity_engine.free_units(QuantityPromotion(required_quantity=2), Decimal('0'), monday) == 0
