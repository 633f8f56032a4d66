"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    WalletReason,

    # Entities
    DayPromotion,
    InventoryItem,
    Payments,
    PricedLine,
    PriceResolutionInput,
    PriceResolutionResult,
    ProductContext,
    PromotionSource,
    QuantityPromotion,
    SaleItem,
    SaleTicket,
    SeasonalPromotion,
    WalletMovement,
)
from .pricing import PricingRules, PriceStage

__all__ = [
    # Enums
    "WalletReason",

    # Entities
    "DayPromotion",
    "InventoryItem",
    "Payments",
    "PricedLine",
    "PriceResolutionInput",
    "PriceResolutionResult",
    "ProductContext",
    "PromotionSource",
    "QuantityPromotion",
    "SaleItem",
    "SaleTicket",
    "SeasonalPromotion",
    "WalletMovement",

    # Pricing
    "PricingRules",
    "PriceStage",
]
