import logging

from feeledger.core.config import settings

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Configure root logging from settings. Safe to call more than once."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format=settings.log_format or DEFAULT_LOG_FORMAT,
    )
    logging.getLogger("feeledger").setLevel(settings.log_level.upper())
