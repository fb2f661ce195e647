"""Logging setup for the service process."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the ``model_service`` logger.

    Safe to call more than once; later calls only change the level.
    """
    logger = logging.getLogger("model_service")
    logger.setLevel(level)
    if not any(getattr(h, "_model_service", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._model_service = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
