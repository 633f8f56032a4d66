from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from app.domain.models import (
    DayPromotion,
    PricingRules,
    ProductContext,
    PromotionSource,
    SeasonalPromotion,
)
from app.domain.services.config_engine import ConfigEngine
from app.domain.services.price_resolution_engine import PriceResolutionEngine
from app.domain.services.quantity_promotion_engine import QuantityPromotionEngine
from app.domain.services.sale_pricing_service import SalePricingService

# 2026-10-19 is a Monday (weekday index 1, "Lunes")
MONDAY = date(2026, 10, 19)
MONDAY_INDEX = 1


def build_promos(
    weekday: int = MONDAY_INDEX,
    percentage=Decimal('0'),
    wallet: bool = False,
    start=None,
    end=None,
    seasonal: SeasonalPromotion = None,
    inapam: bool = False,
) -> PromotionSource:
    """Promotion schedule with a single weekday slot filled"""
    days = [DayPromotion() for _ in range(7)]
    days[weekday] = DayPromotion(
        percentage=Decimal(str(percentage)),
        wallet_eligible=wallet,
        start_date=start,
        end_date=end,
    )
    return PromotionSource(
        day_promotions=tuple(days),
        seasonal=seasonal,
        inapam_discount_enabled=inapam,
    )


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def rules():
    return PricingRules()


@pytest.fixture
def engine(rules):
    return PriceResolutionEngine(rules=rules)


@pytest.fixture
def quantity_engine():
    return QuantityPromotionEngine()


@pytest.fixture
def sale_service(rules):
    return SalePricingService(rules=rules)


@pytest.fixture
def medicine():
    return ProductContext(category="Medicamentos", name="Paracetamol 500mg")


@pytest.fixture
def config_dir():
    return Path(__file__).resolve().parents[1] / "config"


@pytest.fixture
def config_engine(config_dir):
    config_engine = ConfigEngine(config_dir)
    config_engine.load_all()
    return config_engine


@pytest.fixture
def make_promos():
    """Factory for single-slot promotion schedules"""
    return build_promos
