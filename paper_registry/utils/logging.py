"""Centralised logging configuration for the paper registry.

Single entry point for all logging across the project:

    from paper_registry.utils.logging import get_logger
    logger = get_logger(__name__)

setup_logging() runs on first import and only configures the root logger once.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3")

_configured = False


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger once.

    Args:
        level: Log level override (DEBUG/INFO/WARNING/ERROR).
               Defaults to LOG_LEVEL from settings.
        log_file: Optional path for an additional file handler.
                  Defaults to LOG_FILE from settings (empty = stdout only).
    """
    global _configured
    if _configured:
        return

    from paper_registry.utils.config import settings

    level = level or settings.log_level
    log_file = log_file if log_file is not None else settings.log_file

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Ensures root logging is configured first.

    Args:
        name: Logger name, always pass __name__.
    """
    setup_logging()
    return logging.getLogger(name)
