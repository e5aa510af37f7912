import logging

from scripts._path import add_root

add_root()

from database import IS_POSTGRES, SessionLocal
from services.analytics_refresh import refresh_component_stats

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def refresh_views() -> bool:
    if not IS_POSTGRES:
        logger.info("Non-PostgreSQL database; nothing to refresh.")
        return False
    db = SessionLocal()
    try:
        return refresh_component_stats(db)
    finally:
        db.close()


if __name__ == "__main__":
    refresh_views()
