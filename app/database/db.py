"""Engine and session factory for the CRM database.

SQLite is the default store. PostgreSQL URLs are accepted as well; when the
server is unreachable and connectivity is optional, the app drops back to a
local SQLite file so development runs keep working.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import get_config

logger = logging.getLogger(__name__)

config = get_config()
DATABASE_URL = config.DATABASE_URL
FALLBACK_SQLITE_URL = "sqlite:///./pipedesk.db"

engine: Engine
SessionLocal: sessionmaker


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(database_url: str) -> Engine:
    if not database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=config.DEBUG,
            pool_pre_ping=True,
            pool_recycle=3600,
            pool_size=10,
            max_overflow=20,
        )
    # FastAPI runs sync handlers in a threadpool.
    sqlite_engine = create_engine(database_url, echo=config.DEBUG, connect_args={"check_same_thread": False})
    event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
    return sqlite_engine


def _bind(database_url: str) -> None:
    global DATABASE_URL, engine, SessionLocal
    DATABASE_URL = database_url
    engine = _build_engine(database_url)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


_bind(DATABASE_URL)


def get_engine() -> Engine:
    return engine


def get_active_database_url() -> str:
    """URL the engine is bound to, after any SQLite fallback."""
    return DATABASE_URL


def reset_engine(database_url: str | None = None) -> None:
    _bind(database_url or DATABASE_URL)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Session scope for scripts and other non-request callers."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _ping() -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def verify_database_connection() -> bool:
    """Check connectivity; optional deployments may fall back to SQLite."""
    try:
        _ping()
        return True
    except Exception as exc:  # pragma: no cover - exercised in deployment.
        if config.DB_CONNECTIVITY_REQUIRED or DATABASE_URL.startswith("sqlite"):
            logger.exception("database.connection_failed", extra={"event": "database.connection_failed"})
            return False
        return _fall_back_to_sqlite(exc)


def _fall_back_to_sqlite(original_exc: Exception) -> bool:
    original_url = DATABASE_URL
    _bind(FALLBACK_SQLITE_URL)
    try:
        _ping()
    except Exception as fallback_exc:  # pragma: no cover - deployment edge case.
        _bind(original_url)
        logger.error(
            "database.connection_fallback.failed",
            extra={
                "event": "database.connection_fallback.failed",
                "error": str(original_exc),
                "fallback_error": str(fallback_exc),
            },
        )
        return False

    logger.warning(
        "database.connection_fallback.sqlite",
        extra={
            "event": "database.connection_fallback.sqlite",
            "from_scheme": original_url.split("://", 1)[0],
            "error": str(original_exc),
        },
    )
    return True
