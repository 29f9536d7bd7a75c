"""Logging setup shared by the reservation service modules."""

from __future__ import annotations

import logging
from typing import Optional

from app.core.config import settings

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a single stream handler to the ``app`` logger hierarchy."""

    logger = logging.getLogger("app")
    logger.setLevel((level or settings.LOG_LEVEL).upper())
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging"]
