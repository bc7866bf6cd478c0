import logging
from typing import Optional

from app.core.config import settings


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from settings (or an explicit level)"""
    numeric_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=settings.log_format)
    logging.getLogger().setLevel(numeric_level)
