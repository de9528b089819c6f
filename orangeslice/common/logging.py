# orangeslice/common/logging.py
from __future__ import annotations

import logging


def get_logger(name: str = "uvicorn.error", level: int | str | None = None) -> logging.Logger:
    """
    Return a logger that plays nice with Uvicorn if running under it.
    If no handlers are set, we add a basicConfig once.
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


def configure_logging(level: str = "INFO") -> None:
    """Apply the configured level to the package logger tree."""
    get_logger("orangeslice", level)
