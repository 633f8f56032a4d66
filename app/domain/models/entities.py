"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union

DateLike = Union[datetime, date, str, None]


class WalletReason(str, Enum):
    """Reason recorded on a loyalty wallet movement"""
    REWARD = "Premio"
    REWARD_AND_PAYMENT = "Premio-Pago venta"
    PAYMENT = "Pago venta"


@dataclass(frozen=True)
class DayPromotion:
    """Percentage discount for one weekday - Immutable"""
    percentage: Decimal = Decimal('0')
    wallet_eligible: bool = False
    start_date: DateLike = None
    end_date: DateLike = None


@dataclass(frozen=True)
class SeasonalPromotion:
    """Date-ranged discount independent of the weekday - Immutable"""
    percentage: Decimal = Decimal('0')
    wallet_eligible: bool = False
    start_date: DateLike = None
    end_date: DateLike = None


@dataclass(frozen=True)
class PromotionSource:
    """
    Promotion schedule of one inventory row.

    ``day_promotions`` is indexed by weekday (0=Sunday .. 6=Saturday).
    """
    day_promotions: Tuple[DayPromotion, ...] = field(
        default_factory=lambda: tuple(DayPromotion() for _ in range(7))
    )
    seasonal: Optional[SeasonalPromotion] = None
    inapam_discount_enabled: bool = False

    def __post_init__(self):
        if len(self.day_promotions) != 7:
            raise ValueError("Promotion schedule needs exactly 7 weekday entries")

    def for_weekday(self, weekday: int) -> DayPromotion:
        """Weekday promotion by index"""
        return self.day_promotions[weekday % 7]


@dataclass(frozen=True)
class ProductContext:
    """Product fields the pricing rules look at"""
    category: str = ""
    name: str = ""


@dataclass(frozen=True)
class PriceResolutionInput:
    """Everything needed to price one unit at one instant"""
    base_price: Decimal
    product: ProductContext
    promos: PromotionSource
    now: Union[datetime, date]
    weekday: Optional[int] = None
    is_loyalty_customer: bool = False
    is_elderly: bool = False


@dataclass(frozen=True)
class PriceResolutionResult:
    """Final unit price and where it came from"""
    final_price: Decimal
    unit_discount: Decimal
    unit_wallet_credit: Decimal
    applied_promotion_label: str
    discount_display: str


@dataclass(frozen=True)
class QuantityPromotion:
    """Buy-N-pay-N-minus-one promotion (2x1, 3x2, 4x3)"""
    required_quantity: int = 0
    start_date: DateLike = None
    end_date: DateLike = None


@dataclass(frozen=True)
class InventoryItem:
    """Sellable inventory row of one product in one pharmacy"""
    product_id: str
    name: str
    category: str
    sale_price: Decimal
    stock: Decimal
    cost: Decimal = Decimal('0')
    vat: Decimal = Decimal('0')
    promotions: PromotionSource = field(default_factory=PromotionSource)
    quantity_promotion: QuantityPromotion = field(default_factory=QuantityPromotion)

    @property
    def product(self) -> ProductContext:
        return ProductContext(category=self.category, name=self.name)


@dataclass(frozen=True)
class SaleItem:
    """Requested ticket row; price 0 marks a free unit claimed by promotion"""
    product_id: str
    quantity: Decimal
    price: Decimal = Decimal('0')


@dataclass(frozen=True)
class Payments:
    """Tender split for one sale"""
    cash: Decimal = Decimal('0')
    card: Decimal = Decimal('0')
    transfer: Decimal = Decimal('0')
    voucher: Decimal = Decimal('0')

    @property
    def total(self) -> Decimal:
        return self.cash + self.card + self.transfer + self.voucher


@dataclass(frozen=True)
class PricedLine:
    """Priced ticket row - Immutable"""
    product_id: str
    category: str
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal
    discount: Decimal
    wallet_credit: Decimal
    original_price: Decimal
    cost: Decimal
    vat: Decimal
    promotion_label: str
    discount_display: str

    @property
    def is_free(self) -> bool:
        return self.unit_price == Decimal('0')


@dataclass(frozen=True)
class WalletMovement:
    """Loyalty wallet entry produced by a sale"""
    reason: Optional[WalletReason]
    income: Decimal
    expense: Decimal
    new_balance: Decimal


@dataclass(frozen=True)
class SaleTicket:
    """Fully priced sale, ready to persist"""
    lines: Tuple[PricedLine, ...]
    item_count: Decimal
    total: Decimal
    total_discount: Decimal
    total_wallet_credit: Decimal
    is_medical_service: bool
    wallet_movement: Optional[WalletMovement] = None
