import logging

from campus_recruit.core.config import get_settings
from campus_recruit.db.postgres import engine
from campus_recruit.db.tables import metadata

logger = logging.getLogger(__name__)


def init_database() -> dict:
    """Create missing tables and, when enabled, the default admin account."""
    from campus_recruit.services.user_service import ensure_default_admin

    settings = get_settings()
    metadata.create_all(bind=engine)

    seeded = False
    if settings.seed_default_admin:
        seeded = ensure_default_admin()
    logger.info("Database initialised (default admin created: %s)", seeded)
    return {"default_admin_created": seeded}
