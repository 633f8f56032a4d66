"""
PRICE RESOLUTION ENGINE
Resolve the selling price of ONE unit (no quantity promotions)

RESPONSIBILITIES:
- Apply the weekday promotion of the current local day
- Let the seasonal promotion override it when strictly cheaper
- Layer the INAPAM discount on shallow discounts only
- Grant loyalty wallet credit with a fixed precedence
- Produce the applied-promotion label and discount display string

RULES:
❌ Weekday and seasonal discounts never stack
❌ No exceptions on bad data (coerce to 0, clamp, log)
✅ Pure, deterministic output
✅ Each step returns a new PriceStage
"""

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional

from app.domain.models import (
    DayPromotion,
    PriceResolutionInput,
    PriceResolutionResult,
    PriceStage,
    PricingRules,
    SeasonalPromotion,
)
from app.utils.money import HUNDRED, ZERO, format_percentage, to_cents, to_decimal
from app.utils.text import sanitize_promotion_label, weekday_display_name
from app.utils.time import (
    is_within_inclusive_local_range,
    is_within_open_local_range,
    local_day_of,
    to_local_day_start,
)

logger = logging.getLogger(__name__)


class PriceResolutionEngine:
    """
    Price Resolution Engine
    Stateless apart from its rules and injected date/label helpers
    """

    def __init__(
        self,
        rules: Optional[PricingRules] = None,
        day_start: Callable = to_local_day_start,
        in_range: Callable = is_within_inclusive_local_range,
        in_open_range: Callable = is_within_open_local_range,
        local_day: Callable = local_day_of,
        sanitize_label: Callable[[str], str] = sanitize_promotion_label,
        weekday_name: Callable[[int], str] = weekday_display_name,
    ):
        """
        Initialize price resolution engine

        Args:
            rules: Pricing constants (defaults to PricingRules())
            day_start: Stored date -> local midnight (None passes through)
            in_range: Inclusive range test, False when a bound is missing
            in_open_range: Inclusive range test, a missing bound is open
            local_day: Instant -> start of its local day
            sanitize_label: Label cleanup
            weekday_name: Weekday index -> display name
        """
        self.rules = rules or PricingRules()
        self.day_start = day_start
        self.in_range = in_range
        self.in_open_range = in_open_range
        self.local_day = local_day
        self.sanitize_label = sanitize_label
        self.weekday_name = weekday_name

    def resolve_unit_price(self, request: PriceResolutionInput) -> PriceResolutionResult:
        """
        Resolve the final price of one unit

        Args:
            request: Base price, promotion schedule, day and customer flags

        Returns:
            PriceResolutionResult
        """
        base_price = self._coerce_base_price(request.base_price)
        today = self.local_day(request.now)
        weekday = self._resolve_weekday(request.weekday, today)
        earns_wallet = (
            request.is_loyalty_customer
            and self.rules.earns_wallet(request.product.category)
        )
        promos = request.promos

        stage = PriceStage(final_price=base_price)
        stage = self._apply_weekday_promotion(
            stage, base_price, promos.for_weekday(weekday), weekday, today, earns_wallet
        )
        stage = self._apply_seasonal_promotion(
            stage, base_price, promos.seasonal, today, earns_wallet
        )
        stage = self._apply_inapam_discount(
            stage, base_price, request.is_elderly and promos.inapam_discount_enabled
        )
        stage = replace(stage, label=self.sanitize_label(stage.label))
        stage = self._apply_loyalty_fallback(stage, earns_wallet)

        logger.debug(
            f"Resolved unit price {base_price} -> {stage.final_price} "
            f"({stage.label}, wallet {stage.unit_wallet_credit})"
        )

        return PriceResolutionResult(
            final_price=stage.final_price,
            unit_discount=stage.unit_discount,
            unit_wallet_credit=stage.unit_wallet_credit,
            applied_promotion_label=stage.label,
            discount_display=stage.discount_display,
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _apply_weekday_promotion(
        self,
        stage: PriceStage,
        base_price: Decimal,
        promo: DayPromotion,
        weekday: int,
        today: datetime,
        earns_wallet: bool,
    ) -> PriceStage:
        """Step 1: discount of today's weekday slot, if active"""
        pct = self._coerce_percentage(promo.percentage, "weekday")
        if pct <= ZERO:
            return stage

        start = self.day_start(promo.start_date)
        end = self.day_start(promo.end_date)
        if not self.in_open_range(start, end, today):
            return stage

        final_price = self._discounted(base_price, pct)
        return PriceStage(
            final_price=final_price,
            unit_discount=base_price - final_price,
            unit_wallet_credit=self._wallet_credit(final_price, earns_wallet and bool(promo.wallet_eligible)),
            label=self.weekday_name(weekday),
            discount_display=format_percentage(pct),
        )

    def _apply_seasonal_promotion(
        self,
        stage: PriceStage,
        base_price: Decimal,
        promo: Optional[SeasonalPromotion],
        today: datetime,
        earns_wallet: bool,
    ) -> PriceStage:
        """Step 2: seasonal discount replaces the current one only when strictly cheaper"""
        if promo is None or not promo.start_date or not promo.end_date:
            return stage

        start = self.day_start(promo.start_date)
        end = self.day_start(promo.end_date)
        if not self.in_range(start, end, today):
            return stage

        pct = self._coerce_percentage(promo.percentage, "seasonal")
        seasonal_price = self._discounted(base_price, pct)
        if not seasonal_price < stage.final_price:
            return stage

        return PriceStage(
            final_price=seasonal_price,
            unit_discount=base_price - seasonal_price,
            unit_wallet_credit=self._wallet_credit(seasonal_price, earns_wallet and promo.wallet_eligible is True),
            label=self.rules.seasonal_label,
            discount_display=format_percentage(pct),
        )

    def _apply_inapam_discount(
        self,
        stage: PriceStage,
        base_price: Decimal,
        eligible: bool,
    ) -> PriceStage:
        """Step 3: senior discount on top of shallow discounts"""
        if not eligible or not self._below_inapam_threshold(base_price, stage.final_price):
            return stage

        final_price = stage.final_price * (Decimal('1') - self.rules.inapam_rate)
        inapam_display = self.rules.inapam_display
        return replace(
            stage,
            final_price=final_price,
            unit_discount=base_price - final_price,
            label=f"{stage.label}-{self.rules.inapam_label}" if stage.label else self.rules.inapam_label,
            discount_display=(
                f"{stage.discount_display} + {inapam_display}"
                if stage.discount_display else inapam_display
            ),
        )

    def _apply_loyalty_fallback(self, stage: PriceStage, earns_wallet: bool) -> PriceStage:
        """Step 4: customer wallet credit when nothing else granted it, then 'Ninguno'"""
        if stage.label == "" and earns_wallet:
            return replace(
                stage,
                label=self.rules.customer_label,
                unit_wallet_credit=self._wallet_credit(stage.final_price, True),
            )

        if stage.label == self.rules.inapam_label and earns_wallet:
            return replace(
                stage,
                label=f"{self.rules.inapam_label}-{self.rules.customer_label}",
                unit_wallet_credit=self._wallet_credit(stage.final_price, True),
            )

        if stage.label == "":
            return replace(stage, label=self.rules.no_promotion_label)

        return stage

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _discounted(base_price: Decimal, pct: Decimal) -> Decimal:
        return base_price * (Decimal('1') - pct / HUNDRED)

    def _wallet_credit(self, final_price: Decimal, granted: bool) -> Decimal:
        if not granted:
            return ZERO
        return final_price * self.rules.wallet_rate

    def _below_inapam_threshold(self, base_price: Decimal, final_price: Decimal) -> bool:
        """
        Accumulated discount < threshold % of base, compared in whole cents.

        A zero base price is never eligible.
        """
        base_cents = to_cents(base_price)
        if base_cents <= 0:
            return False
        discount_cents = max(0, base_cents - to_cents(final_price))
        threshold_cents = int(
            (Decimal(base_cents) * self.rules.inapam_max_prior_discount_pct / HUNDRED)
            .quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        )
        return discount_cents < threshold_cents

    def _resolve_weekday(self, weekday: Optional[int], today: datetime) -> int:
        if weekday is None:
            return (today.weekday() + 1) % 7
        try:
            return int(weekday) % 7
        except (TypeError, ValueError):
            logger.warning(f"Invalid weekday {weekday!r}, using local day of 'now'")
            return (today.weekday() + 1) % 7

    @staticmethod
    def _coerce_base_price(value) -> Decimal:
        price = to_decimal(value)
        if price < ZERO:
            logger.warning(f"Negative base price {price} clamped to 0")
            return ZERO
        return price

    @staticmethod
    def _coerce_percentage(value, source: str) -> Decimal:
        pct = to_decimal(value)
        if pct < ZERO:
            logger.warning(f"{source} promotion percentage {pct} clamped to 0")
            return ZERO
        if pct > HUNDRED:
            logger.warning(f"{source} promotion percentage {pct} clamped to 100")
            return HUNDRED
        return pct
