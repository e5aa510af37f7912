import logging
import time
from pathlib import Path
from typing import Callable, Iterable

from scripts._path import add_root

add_root()

from sqlalchemy.exc import OperationalError

import models  # noqa: F401
from database import IS_POSTGRES, Base, engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent.parent
VIEW_SQL_FILES: Iterable[Path] = (ROOT / "db/migrations/analytics_views.sql",)


def _retry(operation: Callable[[], None], *, retries: int = 7, delay: float = 3.0) -> None:
    for attempt in range(1, retries + 1):
        try:
            operation()
            return
        except OperationalError as exc:
            if attempt == retries:
                raise
            logger.warning(
                "Database not ready yet (attempt %d/%d). Retrying in %.1f seconds: %s",
                attempt,
                retries,
                delay,
                exc,
            )
            time.sleep(delay)


def _load_sql(path: Path) -> str:
    return path.read_text(encoding="utf-8").lstrip("\ufeff").strip()


def _apply_view_sql() -> None:
    if not IS_POSTGRES:
        logger.info("Non-PostgreSQL database; analytics views are not created.")
        return
    for sql_path in VIEW_SQL_FILES:
        if not sql_path.exists():
            logger.warning("SQL file %s is missing; skipping.", sql_path)
            continue
        sql = _load_sql(sql_path)
        logger.info("Applying SQL: %s", sql_path.name)

        def _execute() -> None:
            with engine.begin() as connection:
                connection.exec_driver_sql(sql)

        _retry(_execute)


def init_db() -> None:
    logger.info("Starting database bootstrap.")
    _retry(lambda: Base.metadata.create_all(bind=engine))
    logger.info("Supply-chain tables ensured.")
    _apply_view_sql()


if __name__ == "__main__":
    init_db()
