import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from placement_hub.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Local/test databases; FastAPI runs sync handlers on worker threads
        return {"connect_args": {"check_same_thread": False}}
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}


engine = create_engine(
    settings.sqlalchemy_url,
    echo=settings.debug,  # Log SQL queries in debug mode
    **_engine_kwargs(settings.sqlalchemy_url)
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(select(profiles))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the store rejected a row for breaking a unique constraint."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code == UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(orig)


def init_db():
    """Create tables that don't exist yet."""
    from placement_hub.db.tables import metadata
    metadata.create_all(engine)


def test_db_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            row = db.execute(text("SELECT 1 as test")).fetchone()
            return row[0] == 1
    except Exception:
        logger.exception("Database connection failed")
        return False


def rows_to_dicts(result) -> list:
    """Convert a result set into a list of plain dicts."""
    return [dict(row) for row in result.mappings().all()]


def to_db_values(data: dict) -> dict:
    """Unwrap Enum members so every driver receives plain strings."""
    return {key: value.value if isinstance(value, Enum) else value for key, value in data.items()}
