"""Logging setup for process entry points."""

import logging
from typing import Optional

from decision_engine.config import settings

LOG_FORMAT = "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once per process.

    Args:
        level: Log level name; defaults to settings.LOG_LEVEL
    """
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    root.addHandler(handler)

    _configured = True
