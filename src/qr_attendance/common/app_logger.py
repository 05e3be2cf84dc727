from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ROOT_LOGGER = "qr_attendance"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(resolved)

    # Avoid duplicate console handlers when create_app() runs more than once
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    for h in logger.handlers:
        h.setLevel(resolved)

    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    base = logging.getLogger(ROOT_LOGGER)
    if not name:
        return base
    if name.startswith(ROOT_LOGGER + "."):
        name = name[len(ROOT_LOGGER) + 1 :]
    return base.getChild(name)
