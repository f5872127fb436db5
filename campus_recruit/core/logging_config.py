"""
Process-wide logging setup.

Application modules log through logging.getLogger(__name__) under the
"campus_recruit" namespace; driver loggers are capped so request logs stay
readable.
"""

import logging

from campus_recruit.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# pymongo logs every server heartbeat at DEBUG
QUIET_LOGGERS = ("pymongo", "passlib", "multipart")

_configured = False


def configure_logging() -> None:
    """Configure logging once per process, levels taken from settings."""
    global _configured
    if _configured:
        return

    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("campus_recruit").setLevel(level)

    # SQL statements are logged only when SQL_ECHO is on
    if not settings.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    if settings.app_env == "test":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _configured = True
