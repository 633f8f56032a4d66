"""
DOMAIN MODELS — PRICING

Pricing rule set and the intermediate stage passed between resolution steps.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import FrozenSet

from app.utils.money import format_percentage
from app.utils.text import normalize_text


@dataclass(frozen=True)
class PricingRules:
    """
    Business constants for unit pricing.

    Defaults mirror config/pricing.yml.
    """
    wallet_rate: Decimal = Decimal('0.02')
    inapam_rate: Decimal = Decimal('0.05')
    inapam_max_prior_discount_pct: Decimal = Decimal('25')
    wallet_excluded_categories: FrozenSet[str] = frozenset({"Recargas", "Servicio Médico"})
    medical_service_category: str = "Servicio Médico"
    consultation_product: str = "Consulta Médica"
    weekend_consultation_product: str = "Consulta Médica Fin de Semana"
    seasonal_label: str = "Temporada"
    inapam_label: str = "INAPAM"
    customer_label: str = "Cliente"
    no_promotion_label: str = "Ninguno"
    free_row_suffix: str = "Gratis"

    def __post_init__(self):
        if not Decimal('0') <= self.wallet_rate <= Decimal('1'):
            raise ValueError(f"wallet_rate must be within [0, 1], got {self.wallet_rate}")
        if not Decimal('0') <= self.inapam_rate <= Decimal('1'):
            raise ValueError(f"inapam_rate must be within [0, 1], got {self.inapam_rate}")
        if not Decimal('0') <= self.inapam_max_prior_discount_pct <= Decimal('100'):
            raise ValueError(
                f"inapam_max_prior_discount_pct must be within [0, 100], "
                f"got {self.inapam_max_prior_discount_pct}"
            )

    def earns_wallet(self, category: str) -> bool:
        """Category may accrue loyalty wallet credit"""
        return category not in self.wallet_excluded_categories

    def is_medical_service(self, category: str) -> bool:
        return normalize_text(category) == normalize_text(self.medical_service_category)

    def is_weekday_consultation(self, product_name: str) -> bool:
        """Regular consultation, sold Monday to Friday only"""
        return normalize_text(product_name) == normalize_text(self.consultation_product)

    def is_weekend_consultation(self, product_name: str) -> bool:
        """Weekend consultation, sold Saturday and Sunday only"""
        return normalize_text(product_name) == normalize_text(self.weekend_consultation_product)

    @property
    def inapam_display(self) -> str:
        return format_percentage(self.inapam_rate * Decimal('100'))


@dataclass(frozen=True)
class PriceStage:
    """
    Snapshot of a unit price after one resolution step.

    Steps never mutate a stage; they return it unchanged or a replacement.
    """
    final_price: Decimal
    unit_discount: Decimal = Decimal('0')
    unit_wallet_credit: Decimal = Decimal('0')
    label: str = ""
    discount_display: str = ""
