"""
Database engine, session factory, and metadata shared across the application.

The search path only reads from the catalog and price store, so sessions
handed out here never commit.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from carecompare.core.config import settings

logger = logging.getLogger(__name__)

_DEFAULT_POOL_KWARGS: dict[str, Any] = {
    "pool_pre_ping": True,
    "future": True,
}


def _build_engine_kwargs(db_url: str) -> dict[str, Any]:
    """Pool options for the configured backend."""

    kwargs = dict(_DEFAULT_POOL_KWARGS)
    if db_url.startswith("sqlite"):
        # SQLite connections are shared across the threads used by asyncio.to_thread
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update({"pool_size": 5, "max_overflow": 5, "pool_timeout": 2, "pool_recycle": 300})
    return kwargs


db_url = settings.database_url
engine: Engine = create_engine(db_url, echo=settings.database_echo, **_build_engine_kwargs(db_url))


@event.listens_for(engine, "connect")
def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
    connection_record.info["connect_time"] = datetime.now()
    logger.debug("Database connection established")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get a read-only database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()


__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "get_db",
]
