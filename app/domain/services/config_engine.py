"""
CONFIG ENGINE
Load, validate, and expose pricing configuration

RESPONSIBILITIES:
- Load pricing.yml
- Validate rates and thresholds
- Expose a read-only PricingRules object

RULES:
✅ Fail fast on invalid config
✅ Deterministic output
"""

import logging
import yaml
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict

from app.domain.models import PricingRules

logger = logging.getLogger(__name__)


class ConfigEngine:
    """
    Configuration Engine
    Single source of truth for pricing configuration
    """

    def __init__(self, config_dir: Path):
        """Initialize with config directory"""
        self.config_dir = Path(config_dir)
        self._raw: Dict[str, Any] = None
        self._pricing_rules: PricingRules = None

    def load_all(self) -> None:
        """Load all configuration files"""
        self._load_pricing()
        self._validate_all()

    def _load_pricing(self) -> None:
        """Load pricing rules from pricing.yml"""
        pricing_file = self.config_dir / "pricing.yml"
        if not pricing_file.exists():
            raise FileNotFoundError(f"Pricing config not found: {pricing_file}")

        with open(pricing_file, 'r', encoding='utf-8') as f:
            self._raw = yaml.safe_load(f) or {}

        data = self._raw.get('pricing')
        if not isinstance(data, dict):
            raise ValueError(f"Invalid pricing config in {pricing_file}. Expected top-level 'pricing' mapping.")

        wallet = data.get('wallet', {})
        inapam = data.get('inapam', {})
        labels = data.get('labels', {})
        consultations = data.get('consultations', {})
        defaults = PricingRules()

        self._pricing_rules = PricingRules(
            wallet_rate=self._decimal(wallet, 'rate', defaults.wallet_rate),
            inapam_rate=self._decimal(inapam, 'rate', defaults.inapam_rate),
            inapam_max_prior_discount_pct=self._decimal(
                inapam, 'max_prior_discount_pct', defaults.inapam_max_prior_discount_pct
            ),
            wallet_excluded_categories=frozenset(
                wallet.get('excluded_categories', defaults.wallet_excluded_categories)
            ),
            medical_service_category=data.get('medical_service_category', defaults.medical_service_category),
            consultation_product=consultations.get('weekday', defaults.consultation_product),
            weekend_consultation_product=consultations.get('weekend', defaults.weekend_consultation_product),
            seasonal_label=labels.get('seasonal', defaults.seasonal_label),
            inapam_label=labels.get('inapam', defaults.inapam_label),
            customer_label=labels.get('customer', defaults.customer_label),
            no_promotion_label=labels.get('none', defaults.no_promotion_label),
            free_row_suffix=labels.get('free_row_suffix', defaults.free_row_suffix),
        )
        logger.info(f"Pricing rules loaded from {pricing_file}")

    @staticmethod
    def _decimal(section: Dict[str, Any], key: str, default: Decimal) -> Decimal:
        if key not in section:
            return default
        try:
            return Decimal(str(section[key]))
        except InvalidOperation:
            raise ValueError(f"Invalid numeric value for '{key}': {section[key]!r}")

    def _validate_all(self) -> None:
        """Validate all configurations"""
        rules = self._pricing_rules
        if not all(isinstance(c, str) and c for c in rules.wallet_excluded_categories):
            raise ValueError("wallet.excluded_categories must be a list of non-empty strings")
        for label in (rules.seasonal_label, rules.inapam_label, rules.customer_label, rules.no_promotion_label):
            if not label:
                raise ValueError("Promotion labels cannot be empty")

    # Public getters

    @property
    def pricing_rules(self) -> PricingRules:
        """Get pricing rules"""
        if self._pricing_rules is None:
            raise RuntimeError("Config not loaded. Call load_all() first")
        return self._pricing_rules

    def get_setting(self, *keys) -> Any:
        """Get raw pricing setting by nested keys"""
        if self._raw is None:
            raise RuntimeError("Config not loaded. Call load_all() first")

        value = self._raw
        for key in keys:
            value = value[key]
        return value
