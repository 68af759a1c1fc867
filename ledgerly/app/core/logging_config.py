"""Process-wide logging setup for the Ledgerly backend."""

import logging

from ledgerly.app.core.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the ``ledgerly`` logger once per process."""
    global _configured
    if _configured:
        return
    settings = get_settings()
    logger = logging.getLogger("ledgerly")
    logger.setLevel((level or settings.log_level).upper())
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    _configured = True
