"""
Logging configuration - a single stdout handler on the ``drviva`` package logger.

Modules use either ``get_logger(__name__)`` or plain ``logging.getLogger(__name__)``;
both propagate to the package logger.
"""
import logging
import sys
from typing import Optional

from drviva.config import get_settings

PACKAGE_LOGGER = "drviva"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: Optional[bool] = None) -> logging.Logger:
    """Attach the stdout handler once and set the level from settings.DEBUG"""
    if debug is None:
        debug = get_settings().DEBUG

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)

    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance"""
    configure_logging()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
