"""
Database engine and session management
PostgreSQL in staging/production, SQLite accepted for local development and tests
"""
import logging
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..config import config

logger = logging.getLogger(__name__)


def _log_database_url_info(url: str) -> None:
    """Log which database is in use without exposing credentials"""
    if url.startswith("postgresql") and "@" in url:
        host_part = url.split("@", 1)[1].split("/")[0]
        logger.info(f"DATABASE_URL configured for PostgreSQL (host: {host_part.split(':')[0]})")
    elif url.startswith("sqlite"):
        logger.info(f"DATABASE_URL configured for SQLite ({url.split('///', 1)[-1] or 'memory'})")
    else:
        logger.warning("DATABASE_URL uses an unrecognised scheme")


def build_engine(url: str):
    """Create an engine with pool settings suited to the backend"""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(url, **kwargs)

        @event.listens_for(sqlite_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    return create_engine(
        url,
        pool_pre_ping=True,  # detect dead connections before use
        pool_size=10,
        max_overflow=10,
        pool_recycle=900,
        pool_timeout=30,
        connect_args={
            "connect_timeout": 10,
            "application_name": "agerapp_api",
        },
    )


_log_database_url_info(config.DATABASE_URL)
engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a session per request

    Rolls back on any error raised while the request is handled and always
    closes the session.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create tables directly from the models (dev/test); deployed databases use alembic"""
    from .base import Base
    from . import models  # noqa: F401  registers every table on Base.metadata

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
