"""Logging configuration helpers for the submission service."""

import logging
import os
from logging import Logger


def configure_logging() -> Logger:
    """Configure basic logging for the service and return its logger."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("core")
