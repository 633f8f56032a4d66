"""
QUANTITY PROMOTION ENGINE
Buy N, pay N-1 (2x1, 3x2, 4x3)
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Union

from app.domain.models import QuantityPromotion
from app.utils.time import (
    is_within_open_local_range,
    local_day_of,
    to_local_day_end,
    to_local_day_start,
)

logger = logging.getLogger(__name__)

QUANTITY_LABELS = {
    2: "2x1",
    3: "3x2",
    4: "4x3",
}


class QuantityPromotionEngine:
    """
    Quantity Promotion Engine
    Decides how many units of a product are free
    """

    def __init__(
        self,
        day_start: Callable = to_local_day_start,
        day_end: Callable = to_local_day_end,
        in_open_range: Callable = is_within_open_local_range,
        local_day: Callable = local_day_of,
    ):
        self.day_start = day_start
        self.day_end = day_end
        self.in_open_range = in_open_range
        self.local_day = local_day

    @staticmethod
    def required_quantity(promo: QuantityPromotion) -> int:
        try:
            return max(0, int(promo.required_quantity or 0))
        except (TypeError, ValueError):
            return 0

    def is_active(self, promo: QuantityPromotion, now: Union[datetime, date]) -> bool:
        """Active when it needs at least 2 units and today is inside its window"""
        if self.required_quantity(promo) < 2:
            return False
        return self.in_open_range(
            self.day_start(promo.start_date),
            self.day_end(promo.end_date),
            self.local_day(now),
        )

    @staticmethod
    def label(required_quantity: int) -> str:
        """Ticket label for the promotion"""
        return QUANTITY_LABELS.get(required_quantity, "Promo")

    def free_units(self, promo: QuantityPromotion, total_quantity, now: Union[datetime, date]) -> int:
        """
        Free units granted for a total quantity

        Args:
            promo: Quantity promotion of the product
            total_quantity: Units on the ticket, charged and free
            now: Sale instant

        Returns:
            Number of free units (0 when inactive)
        """
        if total_quantity <= 0 or not self.is_active(promo, now):
            return 0
        required = self.required_quantity(promo)
        free = int(Decimal(total_quantity) // required)
        logger.debug(f"{self.label(required)}: {free} free of {total_quantity}")
        return free
