import logging
import sys

from app.config import settings


def setup_logging(level: str | None = None) -> None:
    """
    Configure centralized application logging.
    """
    level = level or settings.LOG_LEVEL
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
