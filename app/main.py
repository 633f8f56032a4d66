"""
Application wiring
Build the pricing services from settings and pricing.yml
"""

import logging
from pathlib import Path
from typing import Optional

from app.config import settings
from app.core.logging import setup_logging
from app.domain.services.config_engine import ConfigEngine
from app.domain.services.price_resolution_engine import PriceResolutionEngine
from app.domain.services.quantity_promotion_engine import QuantityPromotionEngine
from app.domain.services.sale_pricing_service import SalePricingService

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_config(config_dir: Optional[Path] = None) -> ConfigEngine:
    """Load pricing configuration (PRICING_CONFIG_DIR by default)"""
    if config_dir is None:
        config_dir = Path(settings.PRICING_CONFIG_DIR)
        # Relative to the project root, not the working directory
        if not config_dir.is_absolute():
            config_dir = PROJECT_ROOT / config_dir
    config_engine = ConfigEngine(Path(config_dir))
    config_engine.load_all()
    return config_engine


def create_sale_pricing_service(config_dir: Optional[Path] = None) -> SalePricingService:
    """
    Configure logging and build a SalePricingService

    Args:
        config_dir: Directory holding pricing.yml

    Returns:
        Ready-to-use SalePricingService
    """
    setup_logging()
    rules = load_config(config_dir).pricing_rules
    logger.info(f"Pricing service ready (env={settings.APP_ENV}, tz={settings.APP_TZ})")
    return SalePricingService(
        rules=rules,
        price_engine=PriceResolutionEngine(rules=rules),
        quantity_engine=QuantityPromotionEngine(),
    )
