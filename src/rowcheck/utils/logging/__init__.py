"""
Structured logging configuration for rowcheck

Usage:
    import logging

    from rowcheck.utils.logging import setup_logging

    setup_logging(level="INFO", json_format=True)
    logger = logging.getLogger(__name__)
    logger.info("Checking tables", extra={"expression": "orders = staged"})
"""

from .config import configure_from_env, flush_logging, setup_logging
from .formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "setup_logging",
    "configure_from_env",
    "flush_logging",
    "JSONFormatter",
    "ConsoleFormatter",
]
