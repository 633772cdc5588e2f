"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only installs a
handler on the package logger, once, at the level given by TRELLIS_LOG_LEVEL.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import get_log_level

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str = "trellis") -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    logger = get_logger()
    resolved = (level or get_log_level()).upper()
    logger.setLevel(getattr(logging, resolved, logging.WARNING))

    if not any(getattr(h, "_trellis", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._trellis = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
