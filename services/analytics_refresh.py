"""Refresh the materialized component statistics behind the ``[STATS]`` source."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import database
from core.logging import get_logger

logger = get_logger(__name__)

REFRESH_COMPONENT_STATS = text("SELECT refresh_component_analytics_mv()")


def refresh_component_stats(db: Session) -> bool:
    """Rebuild ``mv_component_analytics``. Returns ``False`` when nothing was refreshed.

    Only PostgreSQL has the materialized view. Callers run this after their own
    commit, so a failed refresh leaves the statistics stale but the write intact.
    """

    if not database.IS_POSTGRES:
        return False
    try:
        db.execute(REFRESH_COMPONENT_STATS)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Component statistics refresh failed; [STATS] stays stale: %s", exc, exc_info=True)
        return False
    logger.info("Refreshed mv_component_analytics.")
    return True


__all__ = ["REFRESH_COMPONENT_STATS", "refresh_component_stats"]
