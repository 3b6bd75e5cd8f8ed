"""
Logging configuration - Root logger defaults for the application.
"""

import logging

from cinepass.config.settings import get_settings


def configure_logging() -> None:
    """Configure logging defaults for the application."""
    level = get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
