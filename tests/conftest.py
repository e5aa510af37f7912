import os
from typing import Generator, Tuple

import pytest

os.environ.setdefault("DATABASE_ALLOW_NON_POSTGRES", "1")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("DATABASE_URL", os.getenv("DATABASE_URL", os.environ["TEST_DATABASE_URL"]))

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

import database as database_module
import models  # noqa: F401
from database import Base
from models.analytics_views import analytics_metadata


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "postgres: requires a PostgreSQL database")


def _resolve_test_database_url(tmp_dir) -> Tuple[str, bool]:
    candidate = os.getenv("TEST_DATABASE_URL") or os.getenv("DATABASE_URL")
    if not candidate or ":memory:" in candidate:
        # Fan-out queries run on worker threads, each with its own connection,
        # so every connection has to see the same database.
        candidate = f"sqlite+pysqlite:///{tmp_dir / 'supplychain.db'}"
    return candidate, candidate.lower().startswith("postgresql")


def _enable_sqlite_savepoints(test_engine: Engine) -> None:
    @event.listens_for(test_engine, "connect")
    def _do_connect(dbapi_connection, _record):  # pragma: no cover - SQLAlchemy callback
        dbapi_connection.isolation_level = None

    @event.listens_for(test_engine, "begin")
    def _do_begin(connection):  # pragma: no cover - SQLAlchemy callback
        connection.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def engine(tmp_path_factory: pytest.TempPathFactory) -> Generator[Engine, None, None]:
    database_url, is_postgres = _resolve_test_database_url(tmp_path_factory.mktemp("db"))

    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    test_engine = create_engine(database_url, connect_args=connect_args)
    if not is_postgres:
        _enable_sqlite_savepoints(test_engine)

    Base.metadata.create_all(bind=test_engine)
    # On PostgreSQL the analytics objects are views; elsewhere stand them up as tables.
    if not is_postgres:
        analytics_metadata.create_all(bind=test_engine)

    session_factory = sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)
    original_session_local = database_module.SessionLocal
    original_engine = database_module.engine
    database_module.SessionLocal = session_factory
    database_module.engine = test_engine
    try:
        yield test_engine
    finally:
        database_module.SessionLocal = original_session_local
        database_module.engine = original_engine
        if not is_postgres:
            analytics_metadata.drop_all(bind=test_engine)
        Base.metadata.drop_all(bind=test_engine)
        test_engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> Generator[sessionmaker, None, None]:
    """Session factory bound to the test engine; wipes every table afterwards."""

    factory = database_module.SessionLocal
    try:
        yield factory
    finally:
        with engine.begin() as connection:
            for table in reversed(analytics_metadata.sorted_tables):
                connection.execute(table.delete())
            for table in reversed(Base.metadata.sorted_tables):
                connection.execute(table.delete())


@pytest.fixture()
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
