"""Logging setup."""

import logging

from app.config import settings


def setup_logging():
    """Configure root logging once at startup."""
    level = logging.DEBUG if settings.environment == "development" else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # boto's wire logging is noise even in development
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("aiobotocore").setLevel(logging.WARNING)
