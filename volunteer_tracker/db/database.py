"""
Database engine and session management.

Builds the SQLAlchemy engine from environment configuration with sensible
fallbacks (a local SQLite file, or SQLite in-memory under pytest) and exposes
FastAPI dependencies.
"""
import os
import sys
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from volunteer_tracker.utils.config import get_config


def _get_database_url() -> str:
    config = get_config()
    if not config.database_url:
        config.data_dir.mkdir(parents=True, exist_ok=True)
    return config.resolved_database_url()


# Test override strategy:
# 1. If VOLUNTEER_TEST_DB is set, use it.
# 2. Else if running under pytest, force in-memory sqlite.
explicit_test_db = os.getenv("VOLUNTEER_TEST_DB")


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest.

    ``PYTEST_CURRENT_TEST`` is only set while an individual test is running,
    so module import during collection is detected through ``sys.modules``.
    ``PYTEST_RUNNING=1`` forces the test path explicitly.
    """
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    if "pytest" in sys.modules:
        return True
    return False


pytest_indicator = _is_pytest_runtime()

if explicit_test_db:
    DATABASE_URL = explicit_test_db
elif pytest_indicator:
    # In-memory SQLite with StaticPool so the schema persists across connections
    DATABASE_URL = "sqlite+pysqlite:///:memory:"
else:
    DATABASE_URL = _get_database_url()


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    kwargs = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url:
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))


if engine.dialect.name == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # pragma: no cover - driver hook
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_SCHEMA_INIT_DONE = False


def init_schema(bind=None) -> None:
    """Create missing tables for SQLite deployments and tests.

    PostgreSQL deployments are managed by Alembic migrations instead.
    """
    global _SCHEMA_INIT_DONE
    target = bind or engine
    from volunteer_tracker.db import models  # local import to avoid circular import at module load
    models.Base.metadata.create_all(bind=target)
    if bind is None:
        _SCHEMA_INIT_DONE = True


def _ensure_sqlite_schema():
    if _SCHEMA_INIT_DONE:
        return
    if str(engine.url).startswith("sqlite"):
        init_schema()


def get_db():
    """Dependency to get a database session."""
    _ensure_sqlite_schema()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def new_session():
    """Return a standalone session for work outside a request (CLI, background sync)."""
    _ensure_sqlite_schema()
    return SessionLocal()
