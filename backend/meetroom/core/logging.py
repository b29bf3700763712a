"""Logging setup for the meetroom package."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach one stream handler to the package logger; safe to call repeatedly."""
    logger = logging.getLogger("meetroom")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(getattr(handler, "_meetroom_handler", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._meetroom_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
