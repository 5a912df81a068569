"""Logging configuration.

Configures the standard library root logger once for the whole service.
"""

import logging

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging.

    Args:
        level: Logging level name, e.g. "INFO" or "DEBUG".
    """
    global _configured
    if _configured:
        return
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
